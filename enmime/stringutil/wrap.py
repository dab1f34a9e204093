"""Folding long header values on word boundaries."""

from __future__ import annotations

_BLANKS = (0x20, 0x09)


def wrap(max_len: int, *args: str) -> bytes:
    """Join args and fold the result on spaces or tabs before max_len characters.

    Each fold is written as CRLF followed by a space.
    """
    data = "".join(args).encode("utf-8")
    if len(data) < max_len:
        return data

    out = bytearray()
    last_space = -1
    last_written = -1
    line_len = 0
    i = 0
    while i < len(data):
        line_len += 1
        if data[i] in _BLANKS:
            last_space = i
        if line_len >= max_len and last_space >= 0:
            out += data[last_written + 1:last_space]
            out += b"\r\n "
            last_written = last_space
            line_len = 1  # the leading space written above
            i = last_written + 1
            last_space = -1
        i += 1
    out += data[last_written + 1:]
    return bytes(out)