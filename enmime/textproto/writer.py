"""Writing text-protocol lines and dot-encoded blocks."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO, Optional

_CRLF = b"\r\n"


class _State(Enum):
    BEGIN = 0
    BEGIN_LINE = 1
    CR = 2
    DATA = 3


class Writer:
    """Writes lines and dot-encoded blocks to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self._dot: Optional[DotWriter] = None

    def _flush(self) -> None:
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def _close_dot(self) -> None:
        if self._dot is not None:
            self._dot.close()

    def printf_line(self, fmt: str, *args) -> None:
        """Write fmt, formatted with args by the % operator, followed by CRLF."""
        self._close_dot()
        line = fmt % args if args else fmt
        self.stream.write(line.encode("utf-8") + _CRLF)
        self._flush()

    def dot_writer(self) -> "DotWriter":
        """Start a dot-encoded block; close the returned writer to end it."""
        self._close_dot()
        self._dot = DotWriter(self)
        return self._dot


class DotWriter:
    """Dot-encodes written data: escapes leading dots and turns LF into CRLF.

    Closing it writes the terminating ".\\r\\n" line.
    """

    def __init__(self, writer: Writer) -> None:
        self._writer = writer
        self._state = _State.BEGIN
        self._closed = False

    def write(self, data: bytes) -> int:
        """Encode and write data, returning the number of input bytes consumed."""
        if self._closed:
            raise ValueError("write to closed DotWriter")
        out = bytearray()
        for c in data:
            if self._state in (_State.BEGIN, _State.BEGIN_LINE):
                self._state = _State.DATA
                if c == 0x2E:
                    out.append(0x2E)
            if self._state is _State.DATA:
                if c == 0x0D:
                    self._state = _State.CR
                elif c == 0x0A:
                    out.append(0x0D)
                    self._state = _State.BEGIN_LINE
            elif self._state is _State.CR:
                self._state = _State.BEGIN_LINE if c == 0x0A else _State.DATA
            out.append(c)
        self._writer.stream.write(bytes(out))
        return len(data)

    def close(self) -> None:
        """Finish the block with the end line and flush the stream."""
        if self._closed:
            return
        self._closed = True
        if self._writer._dot is self:
            self._writer._dot = None
        if self._state is _State.CR:
            tail = b"\n.\r\n"
        elif self._state is _State.BEGIN_LINE:
            tail = b".\r\n"
        else:
            tail = b"\r\n.\r\n"
        self._writer.stream.write(tail)
        self._writer._flush()

    def __enter__(self) -> "DotWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()