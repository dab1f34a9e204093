"""A MIME-style header mapping canonical keys to lists of values."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional

from enmime.textproto.canonical import canonical_email_mime_header_key


class MIMEHeader:
    """Header fields keyed by canonical name, each holding its values in order.

    The named methods canonicalize the key they are given; item access with
    ``header[key]`` uses the key exactly as written.
    """

    def __init__(self, fields: Optional[Mapping[str, List[str]]] = None) -> None:
        self._fields: Dict[str, List[str]] = {k: list(v) for k, v in (fields or {}).items()}

    def add(self, key: str, value: str) -> None:
        """Append value to the values of key."""
        self._fields.setdefault(canonical_email_mime_header_key(key), []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace the values of key with the single value."""
        self._fields[canonical_email_mime_header_key(key)] = [value]

    def get(self, key: str) -> str:
        """Return the first value of key, or "" if it has none."""
        values = self._fields.get(canonical_email_mime_header_key(key))
        return values[0] if values else ""

    def values(self, key: str) -> List[str]:
        """Return the list of values of key itself, or an empty list."""
        return self._fields.get(canonical_email_mime_header_key(key), [])

    def delete(self, key: str) -> None:
        """Remove every value of key."""
        self._fields.pop(canonical_email_mime_header_key(key), None)

    def __getitem__(self, key: str) -> List[str]:
        return self._fields[key]

    def __setitem__(self, key: str, values: List[str]) -> None:
        self._fields[key] = values

    def __delitem__(self, key: str) -> None:
        if key not in self._fields:
            raise KeyError(key)
        self._fields.pop(key)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def items(self):
        """Return the (key, values) pairs of the header."""
        return self._fields.items()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MIMEHeader):
            return self._fields == other._fields
        if isinstance(other, Mapping):
            return self._fields == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"MIMEHeader({self._fields!r})"