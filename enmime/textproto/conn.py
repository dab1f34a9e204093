"""A text-protocol connection bundling a reader, a writer and a pipeline."""

from __future__ import annotations

import socket

from enmime.textproto.pipeline import Pipeline
from enmime.textproto.reader import Reader
from enmime.textproto.writer import Writer

_ASCII_SPACE = " \t\n\r"
_ASCII_SPACE_BYTES = b" \t\n\r"


class Conn:
    """A connection over a socket, with ``reader``, ``writer`` and ``pipeline``."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._rfile = sock.makefile("rb")
        self._wfile = sock.makefile("wb")
        self.reader = Reader(self._rfile)
        self.writer = Writer(self._wfile)
        self.pipeline = Pipeline()

    def close(self) -> None:
        """Close the connection."""
        try:
            self._wfile.close()
        finally:
            self._rfile.close()
            self._sock.close()

    def cmd(self, fmt: str, *args) -> int:
        """Send a command line once its turn in the pipeline comes.

        The line is fmt formatted with args, followed by CRLF. Returns the id
        to use with the pipeline's start_response and end_response.
        """
        request_id = self.pipeline.next()
        self.pipeline.start_request(request_id)
        try:
            self.writer.printf_line(fmt, *args)
        finally:
            self.pipeline.end_request(request_id)
        return request_id

    def __enter__(self) -> "Conn":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def dial(host: str, port: int) -> Conn:
    """Connect to host and port over TCP and return a Conn for it."""
    return Conn(socket.create_connection((host, port)))


def trim_string(s: str) -> str:
    """Return s without leading and trailing ASCII space."""
    return s.strip(_ASCII_SPACE)


def trim_bytes(b: bytes) -> bytes:
    """Return b without leading and trailing ASCII space."""
    return b.strip(_ASCII_SPACE_BYTES)