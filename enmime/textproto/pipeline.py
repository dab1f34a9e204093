"""Ordering of pipelined requests and responses on one connection."""

from __future__ import annotations

import threading


class Sequencer:
    """Lets numbered events run strictly one after the other, starting at 0."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._id = 0

    def start(self, event_id: int) -> None:
        """Block until every event numbered below event_id has ended."""
        with self._cond:
            while self._id != event_id:
                self._cond.wait()

    def end(self, event_id: int) -> None:
        """Mark the active event as done; RuntimeError if it is not event_id."""
        with self._cond:
            if self._id != event_id:
                raise RuntimeError("out of sync")
            self._id += 1
            self._cond.notify_all()


class Pipeline:
    """Hands out request ids and keeps requests and responses in id order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._id = 0
        self._request = Sequencer()
        self._response = Sequencer()

    def next(self) -> int:
        """Return the id for the next request/response pair."""
        with self._lock:
            request_id = self._id
            self._id += 1
            return request_id

    def start_request(self, request_id: int) -> None:
        """Block until it is this request's turn to be sent."""
        self._request.start(request_id)

    def end_request(self, request_id: int) -> None:
        """Note that the request has been sent."""
        self._request.end(request_id)

    def start_response(self, request_id: int) -> None:
        """Block until it is this request's turn to read its response."""
        self._response.start(request_id)

    def end_response(self, request_id: int) -> None:
        """Note that the response has been read."""
        self._response.end(request_id)