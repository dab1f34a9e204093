"""Decoding of RFC 2047 encoded words in header values."""

from __future__ import annotations

import base64
import io
from typing import Optional

from enmime.coding.charsets import new_charset_reader

_HEX_DIGITS = frozenset("0123456789ABCDEFabcdef")
_LINEAR_WHITESPACE = frozenset(" \t\n\r")


def _q_decode(text: str) -> bytes:
    out = bytearray()
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "_":
            out.append(0x20)
        elif ch == "=":
            if i + 2 >= len(text) + 0 and i + 2 > len(text) - 1:
                raise ValueError("invalid RFC 2047 encoded-word")
            pair = text[i + 1:i + 3]
            if not all(c in _HEX_DIGITS for c in pair):
                raise ValueError(f"invalid hex escape {pair!r}")
            out.append(int(pair, 16))
            i += 2
        elif " " <= ch <= "~" or ch in "\n\r\t":
            out.append(ord(ch))
        else:
            raise ValueError("invalid RFC 2047 encoded-word")
        i += 1
    return bytes(out)


def _decode_text(encoding: str, text: str) -> bytes:
    if encoding in "Bb":
        cleaned = text.replace("\r", "").replace("\n", "")
        return base64.b64decode(cleaned.encode("ascii", errors="strict"), validate=True)
    if encoding in "Qq":
        return _q_decode(text)
    raise ValueError("invalid RFC 2047 encoded-word")


def _convert(charset: str, content: bytes) -> str:
    folded = charset.lower()
    if folded == "utf-8":
        return content.decode("utf-8", errors="replace")
    if folded == "iso-8859-1":
        return content.decode("latin-1")
    if folded == "us-ascii":
        return "".join(chr(b) if b < 0x80 else "\ufffd" for b in content)
    reader = new_charset_reader(folded, io.BytesIO(content))
    return reader.read().decode("utf-8", errors="replace")


def _has_non_whitespace(s: str) -> bool:
    return any(ch not in _LINEAR_WHITESPACE for ch in s)


def _decode_words(header: str) -> str:
    """Decode every encoded word in header; raise LookupError on unknown charsets."""
    first = header.find("=?")
    if first == -1:
        return header

    out = [header[:first]]
    header = header[first:]
    between_words = False
    while True:
        start = header.find("=?")
        if start == -1:
            break
        cur = start + 2
        mark = header.find("?", cur)
        if mark == -1:
            break
        charset = header[cur:mark]
        cur = mark + 1
        if len(header) < cur + len("Q??="):
            break
        encoding = header[cur]
        cur += 1
        if header[cur] != "?":
            break
        cur += 1
        close = header.find("?=", cur)
        if close == -1:
            break
        text = header[cur:close]
        end = close + 2

        try:
            content = _decode_text(encoding, text)
        except (ValueError, UnicodeEncodeError):
            between_words = False
            out.append(header[:start + 2])
            header = header[start + 2:]
            continue

        # Whitespace separating two encoded words is dropped.
        if start > 0 and (not between_words or _has_non_whitespace(header[:start])):
            out.append(header[:start])
        out.append(_convert(charset, content))
        header = header[end:]
        between_words = True

    out.append(header)
    return "".join(out)


def decode_ext_header(value: str) -> str:
    """Decode the RFC 2047 encoded words of a single header line.

    The input is returned unchanged when it cannot be decoded.
    """
    if "=?" not in value:
        return value
    try:
        return _decode_words(value)
    except LookupError:
        return value


def _fix_rfc2047_string(s: str) -> str:
    """Drop CR, LF and spaces from inside encoded words."""
    in_string = False
    within_terminating_equals = False
    question_marks = 0
    out = []
    for ch in s:
        if ch == "=":
            if question_marks == 3:
                in_string = False
            else:
                within_terminating_equals = True
            out.append(ch)
        elif ch == "?":
            if within_terminating_equals:
                in_string = True
            else:
                question_marks += 1
            within_terminating_equals = False
            out.append(ch)
        elif ch in "\n\r ":
            if not in_string:
                out.append(ch)
            within_terminating_equals = False
        else:
            within_terminating_equals = False
            out.append(ch)
    return "".join(out)


def _decode_once(s: str) -> Optional[str]:
    """Decode one layer of encoded words, or return None if nothing changed."""
    upper = s.upper()
    if "?Q?" not in upper and "?B?" not in upper:
        return None
    value = decode_ext_header(s)
    if value == s:
        value = decode_ext_header(_fix_rfc2047_string(value))
        if value == s:
            return None
    return value


def rfc2047_decode(s: str) -> str:
    """Decode s repeatedly while it holds RFC 2047 encoded words.

    A decoded "key=value" result has its value wrapped in double quotes.
    """
    s = s.replace("\n", " ").replace("\r", " ")
    decoded = False
    while True:
        value = _decode_once(s)
        if value is None:
            break
        s = value
        decoded = True

    if not decoded:
        return s
    key, sep, value = s.partition("=")
    if not sep:
        return s
    if not value.startswith('"'):
        value = '"' + value
    if not value.endswith('"'):
        value += '"'
    return f"{key}={value}"