# ulidkit

ULIDs (Universally Unique Lexicographically Sortable Identifiers) for Python,
with no dependencies beyond the standard library.

A ULID is 16 bytes. The first 6 bytes hold a 48-bit big-endian Unix timestamp in milliseconds. The remaining 10 bytes hold entropy. Its text form is
26 characters of Crockford base32, such as `01AN4Z07BY79KA1307SR9X4MV3`.
Both the bytes and the string sort in time order.

## Installation

```
pip install ulidkit
```

## Generating

```python
from ulidkit.monotonic import make

uid = make()          # current time, monotonic entropy within a millisecond
print(uid)
```

`make()` draws from a process-wide, thread-safe source returned by
`default_entropy()`. ULIDs made one after another in the same millisecond
keep increasing. `new_default(dt)` does the same for a given `datetime`.

For more control, call `ulidkit.ulid.new(ms, entropy)` with a millisecond
timestamp and an entropy source. The source can be any of the following:

- an object with `monotonic_read(ms, n)`
- an object with a file-like `read(n)`; `new` reads until it has `n` bytes
- an object with `randbytes(n)`, such as `random.Random` or `random.SystemRandom`
- `None`, which leaves the entropy bytes as zero

```python
import random
from ulidkit.ulid import new, now

uid = new(now(), random.SystemRandom())
without_entropy = new(now(), None)
```

If a `read` source runs out before 10 bytes, `new` raises `EOFError`. A
timestamp above `max_time()` (2**48 - 1) raises `BigTimeError`.

To get strictly increasing entropy within one millisecond from your own
source, wrap it:

```python
from ulidkit.monotonic import monotonic, LockedMonotonicReader

source = monotonic(random.SystemRandom(), 0)  # 0 selects the default increment, 2**32 - 1
shared = LockedMonotonicReader(source)        # safe to share between threads
uid = new(now(), shared)
```

The first read for a given millisecond takes fresh bytes from the source.
For each later read in the same millisecond, the entropy is the previous value plus a random
number from 1 to `inc`. If the increment would not fit in 80 bits,
`MonotonicOverflowError` is raised. A `MonotonicEntropy` on its own is not
safe for concurrent use; wrap it in `LockedMonotonicReader` for that.

## Parsing and inspecting

```python
from ulidkit.ulid import parse, parse_strict

uid = parse("01ARYZ6S410000000000000000")
uid.time()        # 1469918176385  (Unix milliseconds)
uid.timestamp()   # the same instant as an aware UTC datetime
uid.entropy()     # the 10 entropy bytes
bytes(uid)        # the 16 raw bytes
str(uid)          # back to the 26-character form
```

`parse` and `parse_strict` take a `str` or `bytes` and accept upper or lower
case. `parse` gives an undefined value for characters outside the alphabet.
`parse_strict` rejects such characters instead.

All errors derive from `ULIDError`:

- `DataSizeError`: wrong length of text, bytes or entropy
- `InvalidCharactersError`: bad characters (strict parsing only)
- `ULIDOverflowError`: the value does not fit in 128 bits (first character above `7`)
- `BigTimeError`: a timestamp above `max_time()`
- `MonotonicOverflowError`: monotonic entropy ran out of room
- `ScanValueError`: `ULID.scan` was given something other than text, bytes or `None`

`ULID` values are immutable. They compare, sort and hash by their bytes, and
`uid.compare(other)` returns -1, 0 or +1. `uid.with_time(ms)` and
`uid.with_entropy(data)` return modified copies. `uid.is_zero()` tests against
`ZERO`.

To work with database values, use these:

- `ULID.from_bytes(data)` builds a ULID from 16 raw bytes.
- `ULID.scan(src)` builds one from a column value. Text is parsed, bytes are taken as raw, and `None` gives `ZERO`.
- `uid.value()` returns the bytes to store.

Time helpers:

- `now()` is the current time in Unix milliseconds.
- `timestamp(dt)` converts a `datetime` to Unix milliseconds. Naive datetimes are taken as local time.
- `to_datetime(ms)` converts back to an aware UTC `datetime`.

## Command line

```
ulid                       # print a new ULID
ulid --quick               # faster, non-cryptographic entropy
ulid --zero                # entropy fixed to all zeros
ulid 01ARYZ6S410000000000000000
ulid --format rfc3339 --local 01ARYZ6S410000000000000000
ulid --help
```

With no argument, `ulid` prints a new ULID for the current time. By default it draws entropy from
the system's secure random source.

When given a ULID, `ulid` writes the encoded time to standard error.
`--format` (`-f`) is one of these:

- `default`, for example `Tue Jul 30 22:36:16.385 UTC 2016`
- `rfc3339`
- `unix` (seconds)
- `ms`

Times are in UTC unless `--local` (`-l`) is given. An invalid ULID or format prints an error and exits with status 1.