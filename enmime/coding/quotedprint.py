"""A reader that repairs quoted-printable content before decoding."""

from __future__ import annotations

from typing import BinaryIO

MAX_QP_LINE_LEN = 1024
"""Longest line emitted before a soft line break is inserted."""

_ESCAPED_EQUALS = b"=3D"
_LINE_BREAK = b"=\r\n"
_HEX = frozenset(b"0123456789ABCDEFabcdef")
_CHUNK = 8192


def _valid_hex_bytes(v: bytes) -> bool:
    """True if v, following an '=', forms a valid escape or soft line break."""
    if v[:1] == b"\n":
        return True
    if len(v) < 2:
        return False
    if v[:2] == b"\r\n":
        return True
    return v[0] in _HEX and v[1] in _HEX


class QPCleaner:
    """Wraps a binary stream, escaping bytes a quoted-printable decoder rejects.

    Stray '=' signs become "=3D", bytes outside printable ASCII are escaped,
    and soft line breaks keep lines under MAX_QP_LINE_LEN.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._inbuf = b""
        self._pos = 0
        self._eof = False
        self._pending = bytearray()
        self._line_len = 0

    def _fill(self, n: int) -> None:
        while len(self._inbuf) - self._pos < n and not self._eof:
            chunk = self._stream.read(_CHUNK)
            if not chunk:
                self._eof = True
            else:
                self._inbuf = self._inbuf[self._pos:] + chunk
                self._pos = 0

    def _next_byte(self):
        self._fill(1)
        if self._pos >= len(self._inbuf):
            return None
        b = self._inbuf[self._pos]
        self._pos += 1
        return b

    def _peek(self, n: int) -> bytes:
        self._fill(n)
        return self._inbuf[self._pos:self._pos + n]

    def _emit(self, data: bytes) -> None:
        self._pending += data
        self._line_len += len(data)

    def _ensure_line_len(self, requested: int) -> None:
        if self._line_len + requested >= MAX_QP_LINE_LEN:
            self._emit(_LINE_BREAK)
            self._line_len = 0

    def _step(self) -> bool:
        b = self._next_byte()
        if b is None:
            return False

        if self._line_len >= MAX_QP_LINE_LEN:
            self._emit(_LINE_BREAK)
            self._line_len = 0

        if b == 0x3D:  # '='
            self._ensure_line_len(2)
            if _valid_hex_bytes(self._peek(2)):
                self._emit(b"=")
            else:
                self._emit(_ESCAPED_EQUALS)
        elif b == 0x09:
            self._emit(b"\t")
        elif b in (0x0D, 0x0A):
            self._emit(bytes((b,)))
            self._line_len = 0
        elif b < 0x20 or b > 0x7E:
            self._ensure_line_len(2)
            self._emit(b"=%02X" % b)
        else:
            self._emit(bytes((b,)))
        return True

    def read(self, size: int = -1) -> bytes:
        """Read up to size cleaned bytes; b"" means the stream is exhausted."""
        if size is None or size < 0:
            while self._step():
                pass
            out = bytes(self._pending)
            self._pending.clear()
            return out
        while len(self._pending) < size and self._step():
            pass
        out = bytes(self._pending[:size])
        del self._pending[:size]
        return out