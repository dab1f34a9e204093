import io

import pytest

from enmime.textproto.reader import ProtocolError, Reader, TextprotoError
from enmime.textproto.writer import Writer


def reader_for(data: bytes) -> Reader:
    return Reader(io.BytesIO(data))


class _PlainStream:
    """A stream offering only read(), handing out a few bytes at a time."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def read(self, n: int = -1) -> bytes:
        chunk, self._data = self._data[:3], self._data[3:]
        return chunk


def test_read_line_strips_line_endings():
    r = reader_for(b"line1\r\nline2\nline3")
    assert r.read_line() == "line1"
    assert r.read_line() == "line2"
    assert r.read_line() == "line3"
    with pytest.raises(EOFError):
        r.read_line()


def test_read_line_bytes():
    r = reader_for(b"abc\r\n\r\n")
    assert r.read_line_bytes() == b"abc"
    assert r.read_line_bytes() == b""


def test_read_line_small_chunks():
    r = Reader(_PlainStream(b"first line\r\nsecond\n"))
    assert r.read_line() == "first line"
    assert r.read_line() == "second"
    with pytest.raises(EOFError):
        r.read_line()


def test_read_continued_line_documented_example():
    r = reader_for(b"Line 1\n  continued...\nLine 2\n")
    assert r.read_continued_line() == "Line 1 continued..."
    assert r.read_continued_line() == "Line 2"


def test_read_continued_line_empty_is_not_continued():
    r = reader_for(b"\r\n  tail\r\n")
    assert r.read_continued_line() == ""
    assert r.read_line() == "  tail"


def test_read_continued_line_bytes_validator():
    def reject(line: bytes) -> None:
        raise ValueError(line)

    r = reader_for(b"no colon here\r\n")
    with pytest.raises(ValueError):
        r.read_continued_line_bytes(reject)


def test_read_continued_line_bytes_joins_tabs():
    r = reader_for(b"Key: a\r\n\tb\r\n c \r\n\r\n")
    assert r.read_continued_line_bytes() == b"Key: a b c"
    assert r.read_continued_line_bytes() == b""


@pytest.mark.parametrize("expect", [0, 2, 22, 220])
def test_read_code_line_documented_example(expect):
    r = reader_for(b"220 plan9.bell-labs.com ESMTP\r\n")
    assert r.read_code_line(expect) == (220, "plan9.bell-labs.com ESMTP")


def test_read_code_line_mismatch():
    r = reader_for(b"220 plan9.bell-labs.com ESMTP\r\n")
    with pytest.raises(TextprotoError) as info:
        r.read_code_line(31)
    assert info.value.code == 220
    assert info.value.msg == "plan9.bell-labs.com ESMTP"
    assert str(info.value) == "220 plan9.bell-labs.com ESMTP"


@pytest.mark.parametrize("line", [b"22\r\n", b"220x hi\r\n", b"abc hi\r\n", b"099 hi\r\n"])
def test_read_code_line_malformed(line):
    with pytest.raises(ProtocolError):
        reader_for(line).read_code_line(0)


def test_read_code_line_rejects_multi_line():
    with pytest.raises(ProtocolError):
        reader_for(b"250-more to come\r\n250 done\r\n").read_code_line(250)


def test_read_response_multi_line():
    r = reader_for(b"230-Line one\r\n230-Line two\r\n230 Line three\r\n")
    assert r.read_response(23) == (230, "Line one\nLine two\nLine three")


def test_read_response_rfc959_form():
    r = reader_for(b"230-first\r\nsecond line\r\n230 last\r\nnext\r\n")
    assert r.read_response(230) == (230, "first\nsecond line\nlast")
    assert r.read_line() == "next"


def test_read_response_mismatch_reports_full_message():
    r = reader_for(b"550-first\r\n550 second\r\n")
    with pytest.raises(TextprotoError) as info:
        r.read_response(2)
    assert info.value.code == 550
    assert info.value.msg == "first\nsecond"


def test_read_response_truncated():
    with pytest.raises(EOFError):
        reader_for(b"230-first\r\n").read_response(0)


def test_dot_round_trip_with_writer():
    payload = b"abc\n.def\n..ghi\n.jkl\n."
    out = io.BytesIO()
    with Writer(out).dot_writer() as d:
        d.write(payload)
    r = reader_for(out.getvalue() + b"after\r\n")
    assert r.read_dot_bytes() == payload + b"\n"
    assert r.read_line() == "after"


def test_dot_reader_small_reads_match_whole_read():
    data = b"one\r\n..two\r\nthree\r\n.\r\n"
    whole = reader_for(data).read_dot_bytes()
    dot = reader_for(data).dot_reader()
    pieces = []
    while True:
        chunk = dot.read(2)
        if not chunk:
            break
        assert len(chunk) <= 2
        pieces.append(chunk)
    assert b"".join(pieces) == whole


def test_dot_reader_keeps_lone_cr():
    r = reader_for(b"a\rb\r\n.\r\n")
    assert r.read_dot_bytes() == b"a\rb\n"


def test_read_dot_lines():
    r = reader_for(b"first\r\n..second\r\n.\r\nafter\r\n")
    assert r.read_dot_lines() == ["first", ".second"]
    assert r.read_line() == "after"


def test_read_dot_bytes_unexpected_eof():
    with pytest.raises(EOFError):
        reader_for(b"no terminator\r\n").read_dot_bytes()


def test_read_dot_lines_unexpected_eof():
    with pytest.raises(EOFError):
        reader_for(b"no terminator\r\n").read_dot_lines()


def test_next_call_drains_open_dot_reader():
    r = reader_for(b"body line\r\nmore\r\n.\r\nafter\r\n")
    dot = r.dot_reader()
    assert dot.read(4) == b"body"
    assert r.read_line() == "after"
    assert dot.read(10) == b""


def test_upcoming_header_newlines():
    r = reader_for(b"A: 1\r\nB: 2\r\n\r\n")
    assert r.upcoming_header_newlines() == 3
    assert r.read_line() == "A: 1"
    assert reader_for(b"").upcoming_header_newlines() == 0