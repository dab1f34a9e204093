"""Formatting and normalising e-mail address lists."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Iterable, List

_SPECIALS = frozenset('()<>[]:;@\\,"')
_NAME_SPECIALS = frozenset("\"#$%&'(),.:;<>@[]^`{|}~")
_MAX_CONTENT_LEN = 75 - len("=?UTF-8?q?") - len("?=")
_MAX_BASE64_LEN = _MAX_CONTENT_LEN // 4 * 3


def _is_multibyte(ch: str) -> bool:
    return ord(ch) >= 0x80


def _is_vchar(ch: str) -> bool:
    return "!" <= ch <= "~" or _is_multibyte(ch)


def _is_wsp(ch: str) -> bool:
    return ch in " \t"


def _is_atext(ch: str) -> bool:
    return ch != "." and ch not in _SPECIALS and _is_vchar(ch)


def _is_qtext(ch: str) -> bool:
    return ch not in '\\"' and _is_vchar(ch)


def _quote_string(s: str) -> str:
    out = ['"']
    for ch in s:
        if _is_qtext(ch) or _is_wsp(ch):
            out.append(ch)
        elif _is_vchar(ch):
            out.append("\\" + ch)
    out.append('"')
    return "".join(out)


def _local_needs_quoting(local: str) -> bool:
    for i, ch in enumerate(local):
        if _is_atext(ch):
            continue
        if ch == "." and 0 < i < len(local) - 1 and local[i - 1] != ".":
            continue
        return True
    return False


def _encoded_words(kind: str, words: List[str]) -> str:
    return " ".join(f"=?utf-8?{kind}?{w}?=" for w in words)


def _b_encode(s: str) -> str:
    raw = s.encode("utf-8")
    if len(base64.b64encode(raw)) <= _MAX_CONTENT_LEN:
        return _encoded_words("b", [base64.b64encode(raw).decode("ascii")])
    chunks: List[bytes] = []
    current = bytearray()
    for ch in s:
        data = ch.encode("utf-8")
        if len(current) + len(data) > _MAX_BASE64_LEN:
            chunks.append(bytes(current))
            current = bytearray()
        current += data
    chunks.append(bytes(current))
    return _encoded_words("b", [base64.b64encode(c).decode("ascii") for c in chunks])


def _q_encode(s: str) -> str:
    words: List[str] = []
    current: List[str] = []
    length = 0
    for ch in s:
        data = ch.encode("utf-8")
        if len(data) == 1 and " " <= ch <= "~" and ch not in "=?_":
            enc = "_" if ch == " " else ch
        else:
            enc = "".join(f"={b:02X}" for b in data)
        if length + len(enc) > _MAX_CONTENT_LEN:
            words.append("".join(current))
            current, length = [], 0
        current.append(enc)
        length += len(enc)
    words.append("".join(current))
    return _encoded_words("q", words)


@dataclass
class Address:
    """A mailbox: an optional display name and an address."""

    name: str = ""
    address: str = ""

    def __str__(self) -> str:
        local, at, domain = self.address.rpartition("@")
        if not at:
            local, domain = self.address, ""
        if _local_needs_quoting(local):
            local = _quote_string(local)
        mailbox = f"<{local}@{domain}>"
        if not self.name:
            return mailbox

        printable = all(
            (_is_vchar(ch) or _is_wsp(ch)) and not _is_multibyte(ch) for ch in self.name
        )
        if printable:
            return f"{_quote_string(self.name)} {mailbox}"
        if any(ch in _NAME_SPECIALS for ch in self.name):
            return f"{_b_encode(self.name)} {mailbox}"
        return f"{_q_encode(self.name)} {mailbox}"


def join_address(addrs: Iterable[Address]) -> str:
    """Format addresses for use in a To or Cc header."""
    return ", ".join(str(a) for a in addrs)


def ensure_comma_delimited_addresses(s: str) -> str:
    """Normalise an address list so that its entries are separated by commas."""
    s = " ".join(s.split())

    in_quotes = False
    in_domain = False
    escape_sequence = False
    in_angles = False
    out: List[str] = []
    last = len(s) - 1
    for i, ch in enumerate(s):
        if escape_sequence:
            escape_sequence = False
            out.append(ch)
            continue
        if ch == '"':
            in_quotes = not in_quotes
            out.append(ch)
            continue
        if ch == "<":
            in_angles = True
            out.append(ch)
            continue
        if ch == ">":
            in_angles = False
            out.append(ch)
            continue

        if in_quotes:
            if ch == "\\":
                escape_sequence = True
                out.append(ch)
                continue
        else:
            if ch == "@":
                in_domain = True
                out.append(ch)
                continue
            if in_domain:
                if ch == ";":
                    in_domain = False
                    if i == last:
                        continue
                    out.append(",")
                    continue
                if ch == ",":
                    in_domain = False
                    out.append(ch)
                    continue
                if ch == " " and not in_angles:
                    in_domain = False
                    out.append(", ")
                    continue
            if in_angles and ch == " ":
                continue
        out.append(ch)
    return "".join(out)