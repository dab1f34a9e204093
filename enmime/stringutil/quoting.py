"""Finding and splitting on separators that sit outside quoted runs."""

from __future__ import annotations

from typing import List

_ESCAPE = "\\"


def find_unquoted(s: str, v: str, quote: str) -> List[int]:
    """Return the indexes of v in s, ignoring those inside quoted runs.

    Indexes inside an unterminated quoted run are kept, since the quote is
    then treated as a literal character.
    """
    escaped = False
    quoted = False
    indexes: List[int] = []
    quoted_indexes: List[int] = []

    for i, ch in enumerate(s):
        if ch == _ESCAPE:
            escaped = not escaped
        elif ch == quote:
            if escaped:
                escaped = False
                continue
            quoted = not quoted
            if not quoted:
                quoted_indexes.clear()
        elif ch == v:
            escaped = False
            if quoted:
                quoted_indexes.append(i)
            else:
                indexes.append(i)
        else:
            escaped = False

    return indexes + quoted_indexes


def _split(s: str, sep: str, quote: str, keep_sep: bool) -> List[str]:
    positions = find_unquoted(s, sep, quote)
    if not positions:
        return [s]
    result = []
    start = 0
    for ix in positions:
        end = ix + 1 if keep_sep else ix
        result.append(s[start:end])
        start = ix + 1
    result.append(s[start:])
    return result


def split_unquoted(s: str, sep: str, quote: str) -> List[str]:
    """Split s on every sep outside quoted runs, dropping the separators."""
    return _split(s, sep, quote, False)


def split_after_unquoted(s: str, sep: str, quote: str) -> List[str]:
    """Split s after every sep outside quoted runs, keeping the separators."""
    return _split(s, sep, quote, True)