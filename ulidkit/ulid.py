"""Universally Unique Lexicographically Sortable Identifiers.

A ULID is 16 bytes: a 48-bit big-endian Unix millisecond timestamp followed
by 80 bits of entropy. Its text form is 26 characters of Crockford base32.
"""

from __future__ import annotations

import functools
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

__all__ = [
    "ENCODING",
    "ENCODED_SIZE",
    "ZERO",
    "ULIDError",
    "DataSizeError",
    "InvalidCharactersError",
    "BigTimeError",
    "ULIDOverflowError",
    "MonotonicOverflowError",
    "ScanValueError",
    "ULID",
    "new",
    "parse",
    "parse_strict",
    "max_time",
    "now",
    "timestamp",
    "to_datetime",
]

ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
"""The base32 alphabet used in ULID strings."""

ENCODED_SIZE = 26
"""Length of a text encoded ULID."""

_BINARY_SIZE = 16
_ENTROPY_SIZE = 10
_TIME_SIZE = 6
_MAX_TIME = (1 << 48) - 1
_MASK_128 = (1 << 128) - 1
_MASK_64 = (1 << 64) - 1
_INVALID = 0xFF
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

_DECODE = {
    **{ord(ch): value for value, ch in enumerate(ENCODING)},
    **{ord(ch.lower()): value for value, ch in enumerate(ENCODING)},
}


class ULIDError(Exception):
    """Base class for all ULID errors."""


class DataSizeError(ULIDError, ValueError):
    """Raised when parsing or decoding data of the wrong size."""

    def __init__(self, message: str = "ulid: bad data size when unmarshaling") -> None:
        super().__init__(message)


class InvalidCharactersError(ULIDError, ValueError):
    """Raised by strict parsing on characters outside the base32 alphabet."""

    def __init__(self, message: str = "ulid: bad data characters when unmarshaling") -> None:
        super().__init__(message)


class BigTimeError(ULIDError, ValueError):
    """Raised when a time is larger than the maximum a ULID can hold."""

    def __init__(self, message: str = "ulid: time too big") -> None:
        super().__init__(message)


class ULIDOverflowError(ULIDError, ValueError):
    """Raised when an encoded ULID would exceed 128 bits."""

    def __init__(self, message: str = "ulid: overflow when unmarshaling") -> None:
        super().__init__(message)


class MonotonicOverflowError(ULIDError, OverflowError):
    """Raised when incrementing monotonic entropy would overflow."""

    def __init__(self, message: str = "ulid: monotonic entropy overflow") -> None:
        super().__init__(message)


class ScanValueError(ULIDError, TypeError):
    """Raised when a scanned value is neither a string nor bytes."""

    def __init__(self, message: str = "ulid: source value must be a string or byte slice") -> None:
        super().__init__(message)


@functools.total_ordering
class ULID:
    """An immutable 16-byte ULID."""

    __slots__ = ("_data",)

    def __init__(self, data: Union[bytes, bytearray, memoryview] = bytes(_BINARY_SIZE)) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"ULID data must be bytes-like, not {type(data).__name__}")
        raw = bytes(data)
        if len(raw) != _BINARY_SIZE:
            raise DataSizeError()
        self._data = raw

    def __bytes__(self) -> bytes:
        return self._data

    def __str__(self) -> str:
        number = int.from_bytes(self._data, "big")
        return "".join(
            ENCODING[(number >> shift) & 0x1F] for shift in range(125, -1, -5)
        )

    def __repr__(self) -> str:
        return f"ULID('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ULID):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ULID):
            return NotImplemented
        return self._data < other._data

    def __hash__(self) -> int:
        return hash(self._data)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> "ULID":
        """Build a ULID from its 16-byte binary form."""
        return cls(data)

    @classmethod
    def scan(cls, src: Any) -> "ULID":
        """Build a ULID from a database value: None, text or binary."""
        if src is None:
            return cls()
        if isinstance(src, str):
            return parse(src)
        if isinstance(src, (bytes, bytearray, memoryview)):
            return cls.from_bytes(src)
        raise ScanValueError()

    def compare(self, other: "ULID") -> int:
        """Return -1, 0 or +1 comparing this ULID with another."""
        if self._data < other._data:
            return -1
        if self._data > other._data:
            return 1
        return 0

    def time(self) -> int:
        """Unix time in milliseconds encoded in the ULID."""
        return int.from_bytes(self._data[:_TIME_SIZE], "big")

    def timestamp(self) -> datetime:
        """The encoded time as an aware UTC datetime."""
        return to_datetime(self.time())

    def is_zero(self) -> bool:
        """Whether this is the all-zero ULID."""
        return self.compare(ZERO) == 0

    def entropy(self) -> bytes:
        """The 10 entropy bytes."""
        return self._data[_TIME_SIZE:]

    def with_time(self, ms: int) -> "ULID":
        """Return a copy whose time component is ``ms``."""
        if ms > _MAX_TIME:
            raise BigTimeError()
        if ms < 0:
            raise ValueError("ulid: time must not be negative")
        return ULID(ms.to_bytes(_TIME_SIZE, "big") + self._data[_TIME_SIZE:])

    def with_entropy(self, entropy: Union[bytes, bytearray, memoryview]) -> "ULID":
        """Return a copy whose entropy is the given 10 bytes."""
        raw = bytes(entropy)
        if len(raw) != _ENTROPY_SIZE:
            raise DataSizeError()
        return ULID(self._data[:_TIME_SIZE] + raw)

    def value(self) -> bytes:
        """The database value: the binary form of the ULID."""
        return self._data


ZERO = ULID()
"""The zero-value ULID."""


def _read_full(reader: Any, n: int) -> bytes:
    """Read exactly ``n`` bytes from a reader, raising EOFError when short."""
    read = getattr(reader, "read", None)
    if read is not None:
        buffer = bytearray()
        while len(buffer) < n:
            chunk = read(n - len(buffer))
            if not chunk:
                raise EOFError("unexpected EOF" if buffer else "EOF")
            buffer += chunk
        return bytes(buffer)
    randbytes = getattr(reader, "randbytes", None)
    if randbytes is not None:
        return bytes(randbytes(n))
    raise TypeError(f"{type(reader).__name__} is not an entropy source")


def new(ms: int, entropy: Optional[Any] = None) -> ULID:
    """Build a ULID from Unix milliseconds and an optional entropy source.

    The source may offer ``monotonic_read(ms, n)``, a file-like ``read(n)``
    or ``randbytes(n)``.
    """
    base = ZERO.with_time(ms)
    if entropy is None:
        return base
    monotonic_read = getattr(entropy, "monotonic_read", None)
    if monotonic_read is not None:
        data = monotonic_read(ms, _ENTROPY_SIZE)
    else:
        data = _read_full(entropy, _ENTROPY_SIZE)
    return base.with_entropy(data)


def _parse(text: Union[str, bytes, bytearray], strict: bool) -> ULID:
    codes = [ord(ch) for ch in text] if isinstance(text, str) else list(bytes(text))
    if len(codes) != ENCODED_SIZE:
        raise DataSizeError()
    values = [_DECODE.get(code, _INVALID) for code in codes]
    if strict and _INVALID in values:
        raise InvalidCharactersError()
    if codes[0] > ord("7"):
        raise ULIDOverflowError()
    number = 0
    for value in values:
        number = (number << 5) | (value & 0x1F)
    return ULID((number & _MASK_128).to_bytes(_BINARY_SIZE, "big"))


def parse(text: Union[str, bytes, bytearray]) -> ULID:
    """Parse an encoded ULID; invalid characters give an undefined result."""
    return _parse(text, strict=False)


def parse_strict(text: Union[str, bytes, bytearray]) -> ULID:
    """Parse an encoded ULID, rejecting characters outside the alphabet."""
    return _parse(text, strict=True)


def max_time() -> int:
    """The largest Unix millisecond time a ULID can hold."""
    return _MAX_TIME


def timestamp(dt: datetime) -> int:
    """Convert a datetime to Unix milliseconds; naive datetimes are local.

    Times before the epoch wrap around as unsigned 64-bit values.
    """
    if dt.tzinfo is None:
        dt = dt.astimezone(timezone.utc)
    return ((dt - _EPOCH) // _ONE_MS) & _MASK_64


def now() -> int:
    """The current UTC time in Unix milliseconds."""
    return timestamp(datetime.now(timezone.utc))


def to_datetime(ms: int) -> datetime:
    """Convert Unix milliseconds to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=ms)