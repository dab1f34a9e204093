"""Canonical forms of MIME header keys and validity of header bytes."""

from __future__ import annotations

from typing import Callable, Tuple

_TCHAR = frozenset(
    b"0123456789"
    b"abcdefghijklmnopqrstuvwxyz"
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    b"!#$%&'*+-.^_`|~"
)

_Validator = Callable[[int], bool]


def valid_header_field_byte(c: int) -> bool:
    """True if c may appear in an HTTP-style header field name (RFC 7230 token)."""
    return c in _TCHAR


def valid_header_value_byte(c: int) -> bool:
    """True if c may appear in a header field value (VCHAR, SP, HTAB or obs-text)."""
    return 0x21 <= c <= 0x7E or c in (0x20, 0x09) or c >= 0x80


def valid_email_header_field_byte(c: int) -> bool:
    """True if c may appear in an e-mail header field name: printable ASCII but ':'."""
    return 33 <= c <= 126 and c != 0x3A


def _canonicalize(key: str, is_valid: _Validator) -> Tuple[str, bool]:
    """Canonicalize key, reporting whether it holds only valid bytes and spaces.

    Keys containing a space are accepted but left as they are.
    """
    no_canon = False
    for ch in key:
        if is_valid(ord(ch)):
            continue
        if ch == " ":
            no_canon = True
            continue
        return key, False
    if no_canon:
        return key, True

    out = []
    upper = True
    for ch in key:
        if upper and "a" <= ch <= "z":
            ch = ch.upper()
        elif not upper and "A" <= ch <= "Z":
            ch = ch.lower()
        out.append(ch)
        upper = ch == "-"
    return "".join(out), True


def _canonical(key: str, is_valid: _Validator) -> str:
    upper = True
    for ch in key:
        if not is_valid(ord(ch)):
            return key
        if (upper and "a" <= ch <= "z") or (not upper and "A" <= ch <= "Z"):
            return _canonicalize(key, is_valid)[0]
        upper = ch == "-"
    return key


def canonical_mime_header_key(s: str) -> str:
    """Return s with its first letter and each letter after '-' upper case, rest lower.

    Keys holding spaces or bytes not allowed in a token are returned unchanged.
    """
    return _canonical(s, valid_header_field_byte)


def canonical_email_mime_header_key(s: str) -> str:
    """Like canonical_mime_header_key, but accepting every byte e-mail field names allow."""
    return _canonical(s, valid_email_header_field_byte)