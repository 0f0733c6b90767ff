"""Parser interfaces and shared timestamp helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from typing import Protocol

from ..models import PartialRecord


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Per-file values a parser may need (reference clock, default timezone)."""

    now: datetime = field(default_factory=lambda: datetime.now(UTC))
    default_tz: tzinfo = UTC


class LogParser(Protocol):
    """Parser interface: return a PartialRecord if the line matches, else None.

    A structural match whose timestamp cannot be parsed must also return None
    so that the next parser gets a chance.
    """

    name: str

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a log line into a PartialRecord if recognized."""
        ...


def to_utc(ts: datetime, *, default_tz: tzinfo) -> datetime:
    """Normalize a timestamp to timezone-aware UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=default_tz)
    return ts.astimezone(UTC)


def parse_iso_timestamp(value: str, *, default_tz: tzinfo = UTC) -> datetime | None:
    """Parse an ISO8601 timestamp string into a UTC datetime."""
    try:
        ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return to_utc(ts, default_tz=default_tz)
    except (ValueError, OverflowError):
        # OverflowError: the instant is outside datetime's range once shifted to UTC.
        return None


def parse_with_formats(
    value: str,
    formats: Sequence[str],
    *,
    default_tz: tzinfo = UTC,
) -> datetime | None:
    """Try strptime formats in order; fall back to ISO8601."""
    for fmt in formats:
        try:
            return to_utc(datetime.strptime(value, fmt), default_tz=default_tz)
        except (ValueError, OverflowError):
            continue
    return parse_iso_timestamp(value, default_tz=default_tz)


def parse_yearless_timestamp(value: str, *, ctx: ParseContext) -> datetime | None:
    """Parse 'Mon DD HH:MM:SS' by borrowing the year from the reference clock.

    If the result lands after ``ctx.now`` the line is from last year.
    """
    parts = value.split()
    if len(parts) != 3:
        return None
    now = to_utc(ctx.now, default_tz=ctx.default_tz)
    for year in (now.year, now.year - 1):
        try:
            naive = datetime.strptime(f"{year} {' '.join(parts)}", "%Y %b %d %H:%M:%S")
        except ValueError:
            # Feb 29 only exists in leap years; retry with the previous year.
            continue
        try:
            ts = to_utc(naive, default_tz=ctx.default_tz)
        except OverflowError:
            return None
        if ts > now and year == now.year:
            continue
        return ts
    return None
