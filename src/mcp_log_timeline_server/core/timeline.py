"""Combining, filtering and summarizing records from several files."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from .models import NormalizedRecord, Severity


@dataclass(frozen=True, slots=True)
class TimelineSummary:
    """Headline numbers for a set of records."""

    total: int
    warnings: int
    errors: int  # Error + Critical
    by_level: dict[Severity, int] = field(default_factory=dict)
    by_source: dict[str, int] = field(default_factory=dict)
    first: datetime | None = None
    last: datetime | None = None


def merge_records(
    existing: Sequence[NormalizedRecord],
    new: Iterable[NormalizedRecord],
) -> list[NormalizedRecord]:
    """Add a file's records to an existing collection.

    New records get sequence ids continuing after the largest existing id;
    the union is then stable-sorted by timestamp so records sharing a
    timestamp keep their file order.
    """
    ids = [r.sequence_id for r in existing if r.sequence_id is not None]
    next_id = max(ids) + 1 if ids else 0

    numbered = [replace(r, sequence_id=next_id + i) for i, r in enumerate(new)]
    return sorted([*existing, *numbered], key=lambda r: r.timestamp)


def filter_records(
    records: Iterable[NormalizedRecord],
    *,
    levels: Iterable[Severity] | None = None,
    sources: Iterable[str] | None = None,
    contains: str | None = None,
) -> list[NormalizedRecord]:
    """Keep records matching the selections; an empty selection means everything."""
    allowed_levels = set(levels or ())
    allowed_sources = set(sources or ())
    needle = contains.lower() if contains else None

    out: list[NormalizedRecord] = []
    for r in records:
        if allowed_levels and r.level not in allowed_levels:
            continue
        if allowed_sources and r.source not in allowed_sources:
            continue
        if needle is not None and needle not in r.message.lower():
            continue
        out.append(r)
    return out


def available_sources(records: Iterable[NormalizedRecord]) -> list[str]:
    """Sorted distinct sources (drives the source filter)."""
    return sorted({r.source for r in records})


def summarize_records(records: Sequence[NormalizedRecord]) -> TimelineSummary:
    """Count records by level and source."""
    by_level = Counter(r.level for r in records)
    by_source = Counter(r.source for r in records)
    stamps = [r.timestamp for r in records]
    return TimelineSummary(
        total=len(records),
        warnings=by_level[Severity.WARNING],
        errors=by_level[Severity.ERROR] + by_level[Severity.CRITICAL],
        by_level=dict(by_level),
        by_source=dict(by_source),
        first=min(stamps) if stamps else None,
        last=max(stamps) if stamps else None,
    )
