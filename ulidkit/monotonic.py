"""Monotonic entropy sources and default ULID generation."""

from __future__ import annotations

import random
import threading
import time
from datetime import datetime
from typing import Any

from .ulid import (
    ULID,
    MonotonicOverflowError,
    _read_full,
    new,
    now,
    timestamp,
)

__all__ = [
    "MonotonicEntropy",
    "LockedMonotonicReader",
    "monotonic",
    "default_entropy",
    "make",
    "new_default",
]

_DEFAULT_INC = (1 << 32) - 1


class MonotonicEntropy:
    """Entropy that strictly increases between reads within one millisecond.

    Within the same timestamp each read returns the previous entropy plus a
    random number between 1 and ``inc`` inclusive. An ``inc`` of 0 selects
    the default of 2**32 - 1. Not safe for concurrent use.
    """

    def __init__(self, entropy: Any, inc: int = 0) -> None:
        if inc < 0:
            raise ValueError("monotonic increment must not be negative")
        self._source = entropy
        self._inc = inc or _DEFAULT_INC
        self._ms = 0
        self._entropy = 0
        randrange = getattr(entropy, "randrange", None)
        self._rng = entropy if callable(randrange) else None

    def read(self, n: int) -> bytes:
        """Read exactly ``n`` bytes from the underlying source."""
        return _read_full(self._source, n)

    def monotonic_read(self, ms: int, n: int) -> bytes:
        """Return ``n`` entropy bytes, greater than the last ones for the same ``ms``."""
        if self._entropy and self._ms == ms:
            size_bits = 8 * n
            total = self._entropy + self._random()
            self._entropy = total & ((1 << size_bits) - 1)
            if total >> size_bits:
                raise MonotonicOverflowError()
            return self._entropy.to_bytes(n, "big")
        data = self.read(n)
        self._ms = ms
        self._entropy = int.from_bytes(data, "big")
        return data

    def _random(self) -> int:
        """A random increment in the range [1, inc]."""
        if self._inc <= 1:
            return 1
        if self._rng is not None:
            return 1 + self._rng.randrange(self._inc)

        bit_len = self._inc.bit_length()
        byte_len = (bit_len + 7) // 8
        top_mask = (1 << (bit_len % 8 or 8)) - 1
        while True:
            candidate_bytes = bytearray(self.read(byte_len))
            candidate_bytes[0] &= top_mask
            candidate = int.from_bytes(candidate_bytes, "little")
            if 0 < candidate < self._inc:
                return 1 + candidate


class LockedMonotonicReader:
    """Wraps a monotonic reader with a lock for safe concurrent use."""

    def __init__(self, reader: Any) -> None:
        self.reader = reader
        self._lock = threading.Lock()

    def read(self, n: int) -> bytes:
        """Read ``n`` bytes from the wrapped reader."""
        return self.reader.read(n)

    def monotonic_read(self, ms: int, n: int) -> bytes:
        """Serialise monotonic reads on the wrapped reader."""
        with self._lock:
            return self.reader.monotonic_read(ms, n)


def monotonic(entropy: Any, inc: int = 0) -> MonotonicEntropy:
    """Build a monotonic entropy source over ``entropy``."""
    return MonotonicEntropy(entropy, inc)


_DEFAULT_ENTROPY = LockedMonotonicReader(
    MonotonicEntropy(random.Random(time.time_ns()), 0)
)


def default_entropy() -> LockedMonotonicReader:
    """The process-wide, thread-safe monotonic entropy source."""
    return _DEFAULT_ENTROPY


def make() -> ULID:
    """A ULID for the current time with monotonic default entropy."""
    return new(now(), _DEFAULT_ENTROPY)


def new_default(dt: datetime) -> ULID:
    """A ULID for ``dt`` with the default entropy source."""
    return new(timestamp(dt), _DEFAULT_ENTROPY)