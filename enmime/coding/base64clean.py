"""A reader that strips characters a base64 decoder would reject."""

from __future__ import annotations

from typing import BinaryIO, List

_SILENT = frozenset(b"\t\n\r =")
_VALID = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
)


class Base64Cleaner:
    """Wraps a binary stream, dropping bytes that are not base64 characters.

    Whitespace and '=' are dropped silently; any other unexpected byte is
    dropped and described in ``errors``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.errors: List[str] = []

    def _clean(self, chunk: bytes) -> bytes:
        out = bytearray()
        for byte in chunk:
            masked = byte & 0x7F
            if masked in _VALID:
                out.append(byte)
            elif masked not in _SILENT:
                self.errors.append(f"unexpected {chr(byte)!r} in base64 stream")
        return bytes(out)

    def read(self, size: int = -1) -> bytes:
        """Read up to size cleaned bytes; b"" means the stream is exhausted."""
        if size == 0:
            return b""
        while True:
            chunk = self._stream.read(size)
            if not chunk:
                return b""
            cleaned = self._clean(chunk)
            if cleaned or size < 0:
                return cleaned