"""Reading lines, status responses and dot-encoded blocks of a text protocol."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO, Callable, List, Optional, Tuple

_CHUNK = 4096
_DIGITS = frozenset("0123456789")

LineValidator = Callable[[bytes], None]


class ProtocolError(Exception):
    """A response that violates the protocol, such as a malformed status line."""


class TextprotoError(Exception):
    """A numeric error response from a server."""

    def __init__(self, code: int, msg: str) -> None:
        super().__init__(code, msg)
        self.code = code
        self.msg = msg

    def __str__(self) -> str:
        return f"{self.code:03d} {self.msg}"


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _trim(data: bytes) -> bytes:
    """Strip leading and trailing spaces and tabs."""
    return data.strip(b" \t")


def _parse_code_line(line: str, expect_code: int) -> Tuple[int, bool, str]:
    """Split a status line into code, continuation flag and message.

    Raises ProtocolError for malformed lines and TextprotoError when the
    code does not match expect_code.
    """
    if len(line) < 4 or line[3] not in " -":
        raise ProtocolError("short response: " + line)
    continued = line[3] == "-"
    digits = line[:3]
    if not all(ch in _DIGITS for ch in digits) or int(digits) < 100:
        raise ProtocolError("invalid response code: " + line)
    code = int(digits)
    message = line[4:]
    if (
        (1 <= expect_code < 10 and code // 100 != expect_code)
        or (10 <= expect_code < 100 and code // 10 != expect_code)
        or (100 <= expect_code < 1000 and code != expect_code)
    ):
        raise TextprotoError(code, message)
    return code, continued, message


class Reader:
    """Reads protocol lines and blocks from a binary stream, with its own buffer."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        read1 = getattr(stream, "read1", None)
        self._read_chunk = read1 if callable(read1) else stream.read
        self._buf = bytearray()
        self._pos = 0
        self._eof = False
        self._dot: Optional[DotReader] = None

    # Buffer handling.

    def _fill(self) -> bool:
        if self._eof:
            return False
        chunk = self._read_chunk(_CHUNK)
        if not chunk:
            self._eof = True
            return False
        del self._buf[:self._pos]
        self._pos = 0
        self._buf += chunk
        return True

    def _buffered(self) -> int:
        return len(self._buf) - self._pos

    def _peek(self, n: int) -> bytes:
        while self._buffered() < n and self._fill():
            pass
        return bytes(self._buf[self._pos:self._pos + n])

    def _read_byte(self) -> Optional[int]:
        if self._pos >= len(self._buf) and not self._fill():
            return None
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def _unread_byte(self) -> None:
        self._pos -= 1

    def _read_line_slice(self) -> bytes:
        self._close_dot()
        start = self._pos
        while True:
            idx = self._buf.find(b"\n", start)
            if idx >= 0:
                line = bytes(self._buf[self._pos:idx])
                self._pos = idx + 1
                if line.endswith(b"\r"):
                    line = line[:-1]
                return line
            start = len(self._buf)
            before = self._pos
            if not self._fill():
                if self._pos < len(self._buf):
                    line = bytes(self._buf[self._pos:])
                    self._pos = len(self._buf)
                    return line
                raise EOFError("end of stream")
            start -= before - self._pos

    def _skip_space(self) -> int:
        n = 0
        while True:
            c = self._read_byte()
            if c is None:
                break
            if c not in (0x20, 0x09):
                self._unread_byte()
                break
            n += 1
        return n

    def _close_dot(self) -> None:
        while self._dot is not None:
            try:
                self._dot.read(128)
            except EOFError:
                pass

    # Lines.

    def read_line(self) -> str:
        """Read one line without its final LF or CRLF; raise EOFError at the end."""
        return _decode(self._read_line_slice())

    def read_line_bytes(self) -> bytes:
        """Like read_line, but returning bytes."""
        return self._read_line_slice()

    def read_continued_line(self) -> str:
        """Read a line joined with its continuation lines, which start with blanks.

        Each continuation is joined by a single space; surrounding blanks are
        trimmed. Empty lines are never continued.
        """
        return _decode(self.read_continued_line_bytes())

    def read_continued_line_bytes(
        self, validate_first_line: Optional[LineValidator] = None
    ) -> bytes:
        """Like read_continued_line, returning bytes.

        validate_first_line, if given, is called with the first non-empty line
        and may raise to reject it.
        """
        line = self._read_line_slice()
        if not line:
            return b""
        if validate_first_line is not None:
            validate_first_line(line)
        out = bytearray(_trim(line))
        while self._skip_space() > 0:
            try:
                more = self._read_line_slice()
            except EOFError:
                break
            out += b" "
            out += _trim(more)
        return bytes(out)

    # Status responses.

    def _read_code_line(self, expect_code: int) -> Tuple[int, bool, str]:
        return _parse_code_line(self.read_line(), expect_code)

    def read_code_line(self, expect_code: int) -> Tuple[int, str]:
        """Read a "code message" line and return (code, message).

        An expect_code of 1-3 digits must prefix the code, else TextprotoError
        is raised; expect_code <= 0 disables the check. Multi-line responses
        raise ProtocolError.
        """
        code, continued, message = self._read_code_line(expect_code)
        if continued:
            raise ProtocolError("unexpected multi-line response: " + message)
        return code, message

    def read_response(self, expect_code: int) -> Tuple[int, str]:
        """Read a possibly multi-line response and return (code, message).

        Lines of the message are joined with LF. Continuation lines that do not
        carry the response code are taken as they are (RFC 959 style).
        """
        mismatch: Optional[TextprotoError] = None
        try:
            code, continued, message = self._read_code_line(expect_code)
        except TextprotoError as err:
            mismatch = err
            code, message = err.code, err.msg
            continued = self._last_line_continued
        multi = continued
        while continued:
            line = self.read_line()
            try:
                code2, continued, more = _parse_code_line(line, 0)
            except ProtocolError:
                code2, more = -1, ""
            if code2 != code:
                message += "\n" + line.rstrip("\r\n")
                continued = True
                continue
            message += "\n" + more
        if mismatch is not None:
            if multi and message:
                raise TextprotoError(code, message)
            raise mismatch
        return code, message

    @property
    def _last_line_continued(self) -> bool:
        # The line just parsed ended at the current position; its fourth
        # character decides whether it was a continued line.
        end = self._buf.rfind(b"\n", 0, self._pos)
        start = self._buf.rfind(b"\n", 0, end) + 1 if end > 0 else 0
        line = self._buf[start:end if end >= 0 else self._pos]
        return len(line) > 3 and line[3] == 0x2D

    # Dot-encoded blocks.

    def dot_reader(self) -> "DotReader":
        """Return a reader of the decoded text of a dot-encoded block.

        It is valid only until the next call to a method of this reader.
        """
        self._close_dot()
        self._dot = DotReader(self)
        return self._dot

    def read_dot_bytes(self) -> bytes:
        """Read a whole dot-encoded block and return its decoded bytes."""
        return self.dot_reader().read()

    def read_dot_lines(self) -> List[str]:
        """Read a dot-encoded block and return its lines without line endings."""
        lines: List[str] = []
        while True:
            try:
                line = self.read_line()
            except EOFError:
                raise EOFError("unexpected EOF in dot-encoded block") from None
            if line.startswith("."):
                if len(line) == 1:
                    return lines
                line = line[1:]
            lines.append(line)

    def upcoming_header_newlines(self) -> int:
        """Return the number of newlines already buffered, as a size hint."""
        self._peek(1)
        return self._buf.count(b"\n", self._pos)


class _DotState(Enum):
    BEGIN_LINE = 0
    DOT = 1
    DOT_CR = 2
    CR = 3
    DATA = 4
    EOF = 5


class DotReader:
    """Decodes a dot-encoded block: drops escape dots and turns CRLF into LF.

    Reading stops after the terminating ".\\r\\n" line, which is consumed.
    """

    def __init__(self, reader: Reader) -> None:
        self._reader = reader
        self._state = _DotState.BEGIN_LINE
        self._broken = False

    def _detach(self) -> None:
        if self._reader._dot is self:
            self._reader._dot = None

    def read(self, size: int = -1) -> bytes:
        """Read up to size decoded bytes (all if size < 0); b"" at the block end.

        Raises EOFError if the stream ends before the terminating line.
        """
        if self._broken:
            raise EOFError("unexpected EOF in dot-encoded block")
        r = self._reader
        out = bytearray()
        while (size < 0 or len(out) < size) and self._state is not _DotState.EOF:
            c = r._read_byte()
            if c is None:
                self._broken = True
                self._detach()
                if out and size >= 0:
                    return bytes(out)
                raise EOFError("unexpected EOF in dot-encoded block")
            state = self._state
            if state is _DotState.BEGIN_LINE:
                if c == 0x2E:
                    self._state = _DotState.DOT
                    continue
                if c == 0x0D:
                    self._state = _DotState.CR
                    continue
                self._state = _DotState.DATA
            elif state is _DotState.DOT:
                if c == 0x0D:
                    self._state = _DotState.DOT_CR
                    continue
                if c == 0x0A:
                    self._state = _DotState.EOF
                    continue
                self._state = _DotState.DATA
            elif state is _DotState.DOT_CR:
                if c == 0x0A:
                    self._state = _DotState.EOF
                    continue
                r._unread_byte()
                c = 0x0D
                self._state = _DotState.DATA
            elif state is _DotState.CR:
                if c == 0x0A:
                    self._state = _DotState.BEGIN_LINE
                else:
                    r._unread_byte()
                    c = 0x0D
                    self._state = _DotState.DATA
            elif state is _DotState.DATA:
                if c == 0x0D:
                    self._state = _DotState.CR
                    continue
                if c == 0x0A:
                    self._state = _DotState.BEGIN_LINE
            out.append(c)
        if self._state is _DotState.EOF:
            self._detach()
        return bytes(out)