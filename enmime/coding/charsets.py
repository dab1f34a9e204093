"""Charset lookup and conversion of text in legacy charsets into UTF-8."""

from __future__ import annotations

import codecs
import io
import re
from typing import BinaryIO, Dict, Optional, Tuple

_UTF8 = "utf-8"
_REPLACEMENT = "replacement"
_USER_DEFINED = "x-user-defined"
_CHUNK = 8192

# Canonical charset name, the codec used to decode it, and every label for it.
# A codec of None means the bytes are already UTF-8 and pass through untouched.
_CHARSETS: Tuple[Tuple[str, Optional[str], Tuple[str, ...]], ...] = (
    (_UTF8, None, ("unicode-1-1-utf-8", "utf-8", "utf8", "utf8mb4")),
    ("utf-7", "utf-7", ("utf-7", "utf7")),
    ("ibm866", "cp866", ("866", "cp866", "csibm866", "ibm866")),
    ("iso-8859-2", "iso8859_2", (
        "csisolatin2", "iso-8859-2", "iso-ir-101", "iso8859-2", "iso88592",
        "iso_8859-2", "iso_8859-2:1987", "l2", "latin2", "8859-2", "8859_2",
    )),
    ("iso-8859-3", "iso8859_3", (
        "csisolatin3", "iso-8859-3", "iso-ir-109", "iso8859-3", "iso88593",
        "iso_8859-3", "iso_8859-3:1988", "l3", "latin3", "8859-3", "8859_3",
    )),
    ("iso-8859-4", "iso8859_4", (
        "csisolatin4", "iso-8859-4", "iso-ir-110", "iso8859-4", "iso88594",
        "iso_8859-4", "iso_8859-4:1988", "l4", "latin4", "8859-4", "8859_4",
    )),
    ("iso-8859-5", "iso8859_5", (
        "csisolatincyrillic", "cyrillic", "iso-8859-5", "iso-ir-144", "iso8859-5",
        "iso88595", "iso_8859-5", "iso_8859-5:1988", "8859-5", "8859_5",
    )),
    ("iso-8859-6", "iso8859_6", (
        "arabic", "asmo-708", "csiso88596e", "csiso88596i", "csisolatinarabic",
        "ecma-114", "iso-8859-6", "iso-8859-6-e", "iso-8859-6-i", "iso-ir-127",
        "iso8859-6", "iso88596", "iso_8859-6", "iso_8859-6:1987", "8859-6", "8859_6",
    )),
    ("iso-8859-7", "iso8859_7", (
        "csisolatingreek", "ecma-118", "elot_928", "greek", "greek8", "iso-8859-7",
        "iso-ir-126", "iso8859-7", "iso88597", "iso_8859-7", "iso_8859-7:1987",
        "sun_eu_greek", "8859-7", "8859_7",
    )),
    ("iso-8859-8", "iso8859_8", (
        "csiso88598e", "csisolatinhebrew", "hebrew", "iso-8859-8", "iso-8859-8-e",
        "iso-ir-138", "iso8859-8", "iso88598", "iso_8859-8", "iso_8859-8:1988",
        "visual", "8859-8", "8859_8",
    )),
    ("iso-8859-8-i", "iso8859_8", ("csiso88598i", "iso-8859-8-i", "logical")),
    ("iso-8859-10", "iso8859_10", (
        "csisolatin6", "iso-8859-10", "iso-ir-157", "iso8859-10", "iso885910",
        "l6", "latin6", "8859-10", "8859_10",
    )),
    ("iso-8859-13", "iso8859_13", (
        "iso-8859-13", "iso8859-13", "iso885913", "8859-13", "8859_13",
    )),
    ("iso-8859-14", "iso8859_14", (
        "iso-8859-14", "iso8859-14", "iso885914", "8859-14", "8859_14",
    )),
    ("iso-8859-15", "iso8859_15", (
        "csisolatin9", "iso-8859-15", "iso8859-15", "iso885915", "iso_8859-15",
        "l9", "8859-15", "8859_15",
    )),
    ("iso-8859-16", "iso8859_16", ("iso-8859-16", "8859-16", "8859_16")),
    ("koi8-r", "koi8_r", ("cskoi8r", "koi", "koi8", "koi8-r", "koi8_r")),
    ("koi8-u", "koi8_u", ("koi8-u",)),
    ("macintosh", "mac_roman", ("csmacintosh", "mac", "macintosh", "x-mac-roman")),
    ("windows-874", "cp874", (
        "dos-874", "iso-8859-11", "iso8859-11", "iso885911", "tis-620", "windows-874",
    )),
    ("windows-1250", "cp1250", ("cp1250", "windows-1250", "x-cp1250", "238")),
    ("windows-1251", "cp1251", ("cp1251", "windows-1251", "x-cp1251")),
    ("windows-1252", "cp1252", (
        "ansi_x3.4-1968", "ascii", "cp1252", "cp819", "csisolatin1", "ibm819",
        "iso-ir-100", "l1", "latin1", "us-ascii", "windows-1252", "x-cp1252",
        "iso646-us", "iso: western", "we8iso8859p1", "8859-1", "8859_1",
    )),
    ("iso-8859-1", "latin-1", (
        "iso-8859-1", "iso8859-1", "iso8859_1", "iso88591", "iso_8859-1",
        "iso_8859-1:1987",
    )),
    ("windows-1253", "cp1253", ("cp1253", "windows-1253", "x-cp1253")),
    ("windows-1254", "cp1254", (
        "cp1254", "csisolatin5", "iso-8859-9", "iso-ir-148", "iso8859-9", "iso88599",
        "iso_8859-9", "iso_8859-9:1989", "l5", "latin5", "windows-1254", "x-cp1254",
    )),
    ("windows-1255", "cp1255", ("cp1255", "windows-1255", "x-cp1255")),
    ("windows-1256", "cp1256", ("cp1256", "windows-1256", "x-cp1256")),
    ("windows-1257", "cp1257", ("cp1257", "windows-1257", "x-cp1257")),
    ("windows-1258", "cp1258", ("cp1258", "windows-1258", "x-cp1258")),
    ("x-mac-cyrillic", "mac_cyrillic", ("x-mac-cyrillic", "x-mac-ukrainian")),
    ("gbk", "gbk", (
        "chinese", "csgb2312", "csiso58gb231280", "gb2312", "gb_2312", "gb_2312-80",
        "gbk", "iso-ir-58", "x-gbk", "cp936",
    )),
    ("gb18030", "gb18030", ("gb18030",)),
    ("hz-gb-2312", "hz", ("hz-gb-2312",)),
    ("big5", "cp950", ("big5", "big5-hkscs", "cn-big5", "csbig5", "x-x-big5", "136")),
    ("euc-jp", "euc_jp", ("cseucpkdfmtjapanese", "euc-jp", "x-euc-jp")),
    ("iso-2022-jp", "iso2022_jp", ("csiso2022jp", "iso-2022-jp")),
    ("shift_jis", "cp932", (
        "csshiftjis", "ms_kanji", "shift-jis", "shift_jis", "sjis", "windows-31j",
        "x-sjis", "cp932",
    )),
    ("euc-kr", "cp949", (
        "cseuckr", "csksc56011987", "euc-kr", "iso-ir-149", "korean",
        "ks_c_5601-1987", "ks_c_5601-1989", "ksc5601", "ksc_5601", "windows-949",
    )),
    (_REPLACEMENT, _REPLACEMENT, (
        "csiso2022kr", "iso-2022-kr", "iso-2022-cn", "iso-2022-cn-ext",
    )),
    ("utf-16be", "utf-16-be", ("utf-16be",)),
    ("utf-16le", "utf-16-le", ("utf-16", "utf-16le")),
    (_USER_DEFINED, _USER_DEFINED, ("x-user-defined",)),
    ("cp850", "cp850", ("cp850", "cp-850", "ibm850")),
)

_ENCODINGS: Dict[str, Tuple[str, Optional[str]]] = {
    label: (name, codec) for name, codec, labels in _CHARSETS for label in labels
}

_META_CHARSET = re.compile(
    r'<meta.*charset="?\s*(?P<charset>[a-zA-Z0-9_.:-]+)\s*"?', re.IGNORECASE
)


class _ReplacementDecoder(codecs.IncrementalDecoder):
    """Decodes any input to a single U+FFFD, emitted once input ends."""

    def __init__(self, errors: str = "strict") -> None:
        super().__init__(errors)
        self._emitted = False

    def decode(self, input: bytes, final: bool = False) -> str:
        if final and not self._emitted:
            self._emitted = True
            return "\ufffd"
        return ""

    def reset(self) -> None:
        self._emitted = False


class _UserDefinedDecoder(codecs.IncrementalDecoder):
    """Maps ASCII to itself and bytes 0x80-0xFF into U+F780-U+F7FF."""

    def decode(self, input: bytes, final: bool = False) -> str:
        return "".join(chr(b) if b < 0x80 else chr(0xF700 + b) for b in input)


def _lookup(charset: str) -> Optional[str]:
    try:
        return _ENCODINGS[charset.lower()][1]
    except KeyError:
        raise LookupError(f"unsupported charset {charset!r}") from None


def _decoder(codec: str) -> codecs.IncrementalDecoder:
    if codec == _REPLACEMENT:
        return _ReplacementDecoder()
    if codec == _USER_DEFINED:
        return _UserDefinedDecoder()
    return codecs.getincrementaldecoder(codec)(errors="replace")


class _CharsetReader(io.RawIOBase):
    """A binary stream yielding the UTF-8 form of text read in another charset."""

    def __init__(self, stream: BinaryIO, decoder: codecs.IncrementalDecoder) -> None:
        super().__init__()
        self._stream = stream
        self._decoder = decoder
        self._pending = bytearray()
        self._done = False

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending and not self._done:
            chunk = self._stream.read(_CHUNK)
            final = not chunk
            self._pending += self._decoder.decode(chunk or b"", final=final).encode(_UTF8)
            self._done = final
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        del self._pending[:n]
        return n


def convert_to_utf8_string(charset: str, data: bytes) -> str:
    """Decode data written in charset; raise LookupError for an unknown charset."""
    codec = _lookup(charset)
    if codec is None:
        return data.decode(_UTF8, errors="replace")
    return _decoder(codec).decode(data, final=True)


def new_charset_reader(charset: str, stream: BinaryIO) -> BinaryIO:
    """Return a binary stream of the UTF-8 form of stream, read as charset.

    UTF-8 input is returned as it is. Raises LookupError for an unknown charset.
    """
    codec = _lookup(charset)
    if codec is None:
        return stream
    return io.BufferedReader(_CharsetReader(stream, _decoder(codec)))


def find_charset_in_html(html: str) -> str:
    """Return the charset named by the first HTML meta tag, or "" if none."""
    match = _META_CHARSET.search(html)
    return match.group("charset") if match else ""