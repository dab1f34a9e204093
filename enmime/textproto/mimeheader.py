"""Reading MIME-style header blocks from a text-protocol reader."""

from __future__ import annotations

from typing import Callable, Optional

from enmime.textproto.canonical import (
    _canonicalize,
    valid_email_header_field_byte,
    valid_header_field_byte,
    valid_header_value_byte,
)
from enmime.textproto.header import MIMEHeader
from enmime.textproto.reader import ProtocolError, Reader

_ENTRY_OVERHEAD = 100


def _must_have_field_name_colon(line: bytes) -> None:
    """Reject a first header line that lacks the colon ending its field name."""
    if b":" not in line:
        text = line.decode("utf-8", "surrogateescape")
        raise ProtocolError(f'malformed MIME header: missing colon: "{text}"')


def _read_header(
    reader: Reader,
    limit: Optional[int],
    is_valid_key_byte: Callable[[int], bool],
    check_values: bool,
) -> MIMEHeader:
    header = MIMEHeader()

    first = reader._peek(1)
    if first in (b" ", b"\t"):
        line = reader.read_line()
        raise ProtocolError("malformed MIME header initial line: " + line)

    while True:
        kv = reader.read_continued_line_bytes(_must_have_field_name_colon)
        if not kv:
            return header

        raw_key, sep, raw_value = kv.partition(b":")
        text = kv.decode("utf-8", "surrogateescape")
        if not sep:
            raise ProtocolError("malformed MIME header line: " + text)
        key, ok = _canonicalize(raw_key.decode("latin-1"), is_valid_key_byte)
        if not ok:
            raise ProtocolError("malformed MIME header line: " + text)
        if check_values and not all(valid_header_value_byte(c) for c in raw_value):
            raise ProtocolError("malformed MIME header line: " + text)

        # An empty field name is skipped rather than rejected.
        if not key:
            continue

        value_bytes = raw_value.lstrip(b" \t")
        value = value_bytes.decode("utf-8", "surrogateescape")

        if limit is not None:
            if key not in header:
                limit -= len(key) + _ENTRY_OVERHEAD
            limit -= len(value_bytes)
            if limit < 0:
                raise ValueError("message too large")

        if key in header:
            header[key].append(value)
        else:
            header[key] = [value]


def read_mime_header(reader: Reader, limit: Optional[int] = None) -> MIMEHeader:
    """Read header lines up to a blank line into a MIMEHeader.

    Field names must be HTTP tokens and values must hold only valid bytes;
    ProtocolError is raised otherwise. ValueError is raised when the header
    exceeds limit, and EOFError when the stream ends before the blank line.
    """
    return _read_header(reader, limit, valid_header_field_byte, True)


def read_email_mime_header(reader: Reader, limit: Optional[int] = None) -> MIMEHeader:
    """Like read_mime_header, but accepting every field name and value e-mail allows."""
    return _read_header(reader, limit, valid_email_header_field_byte, False)