"""Thread-safe random source and random (version 4) UUIDs."""

from __future__ import annotations

import random
import threading
import time
from typing import Optional, Protocol


class _ByteSource(Protocol):
    def randbytes(self, n: int) -> bytes: ...


class LockedSource:
    """A seeded pseudo-random source that is safe to share between threads."""

    def __init__(self, seed: int) -> None:
        self._lock = threading.Lock()
        self._rng = random.Random(seed)

    def randbytes(self, n: int) -> bytes:
        """Return n random bytes."""
        with self._lock:
            return self._rng.randbytes(n)

    def getrandbits(self, k: int) -> int:
        """Return a random integer of k bits."""
        with self._lock:
            return self._rng.getrandbits(k)

    def seed(self, seed: int) -> None:
        """Reset the source to the given seed."""
        with self._lock:
            self._rng.seed(seed)


_global_source = LockedSource(time.time_ns())


def new_uuid(rng: Optional[_ByteSource] = None) -> str:
    """Return a random RFC 4122 UUID, drawn from rng or a shared source."""
    source = rng if rng is not None else _global_source
    raw = bytearray(source.randbytes(16))
    raw[8] = (raw[8] & 0x3F) | 0x80  # variant, RFC 4122 section 4.1.1
    raw[6] = (raw[6] & 0x0F) | 0x40  # version 4, section 4.1.3
    h = raw.hex()
    return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"