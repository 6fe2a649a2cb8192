"""Command line tool that generates ULIDs or shows the time of one."""

from __future__ import annotations

import argparse
import random
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from .ulid import ULIDError, new, parse, timestamp, to_datetime

__all__ = ["format_time", "main"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_FORMATS = ("default", "rfc3339", "unix", "ms")


class _UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


class _ZeroReader:
    def read(self, n: int) -> bytes:
        return bytes(n)


def _offset(dt: datetime, utc_as_z: bool, colon: bool) -> str:
    offset = dt.utcoffset() or timedelta(0)
    minutes = int(offset.total_seconds()) // 60
    if minutes == 0 and utc_as_z:
        return "Z"
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    sep = ":" if colon else ""
    return f"{sign}{hours:02d}{sep}{mins:02d}"


def format_time(dt: datetime, fmt: str) -> str:
    """Format a datetime as ``default``, ``rfc3339``, ``unix`` or ``ms``."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    kind = fmt.lower()
    millis = dt.microsecond // 1000
    if kind == "default":
        frac = f".{millis:03d}".rstrip("0").rstrip(".") if millis else ""
        zone = dt.tzname() or _offset(dt, utc_as_z=False, colon=False)
        return (
            f"{_WEEKDAYS[dt.weekday()]} {_MONTHS[dt.month - 1]} {dt.day:02d} "
            f"{dt:%H:%M:%S}{frac} {zone} {dt.year:04d}"
        )
    if kind == "rfc3339":
        return (
            f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}T{dt:%H:%M:%S}.{millis:03d}"
            f"{_offset(dt, utc_as_z=True, colon=True)}"
        )
    if kind == "unix":
        return str((dt - _EPOCH) // timedelta(seconds=1))
    if kind == "ms":
        return str((dt - _EPOCH) // timedelta(milliseconds=1))
    raise ValueError(f"invalid --format {fmt}")


def _build_parser() -> _Parser:
    parser = _Parser(
        prog="ulid",
        add_help=False,
        description="Generate a ULID, or show the time encoded in one.",
    )
    parser.add_argument(
        "-f", "--format", default="default", metavar="<format>",
        help="when parsing, show times in this format: default, rfc3339, unix, ms",
    )
    parser.add_argument(
        "-l", "--local", action="store_true",
        help="when parsing, show local time instead of UTC",
    )
    parser.add_argument(
        "-q", "--quick", action="store_true",
        help="when generating, use non-crypto-grade entropy",
    )
    parser.add_argument(
        "-z", "--zero", action="store_true",
        help="when generating, fix entropy to all-zeroes",
    )
    parser.add_argument(
        "-h", "--help", action="store_true", help="print this help text",
    )
    parser.add_argument("ulids", nargs="*", metavar="ULID", help=argparse.SUPPRESS)
    return parser


def _generate(quick: bool, zero: bool) -> int:
    entropy: Any = random.SystemRandom()
    if quick:
        entropy = random.Random(time.time_ns())
    if zero:
        entropy = _ZeroReader()
    try:
        ulid = new(timestamp(datetime.now(timezone.utc)), entropy)
    except (ULIDError, EOFError) as exc:
        print(exc, file=sys.stderr)
        return 1
    print(ulid)
    return 0


def _show(text: str, local: bool, fmt: str) -> int:
    try:
        ulid = parse(text)
    except ULIDError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        dt = to_datetime(ulid.time())
        if local:
            dt = dt.astimezone()
    except (OverflowError, OSError):
        print("ulid: time out of displayable range", file=sys.stderr)
        return 1
    print(format_time(dt, fmt), file=sys.stderr)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the exit status."""
    parser = _build_parser()
    try:
        args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    except _UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    if args.help:
        parser.print_help(sys.stderr)
        return 0
    fmt = args.format.lower()
    if fmt not in _FORMATS:
        print(f"invalid --format {args.format}", file=sys.stderr)
        return 1
    if not args.ulids:
        return _generate(args.quick, args.zero)
    return _show(args.ulids[0], args.local, fmt)


if __name__ == "__main__":
    sys.exit(main())