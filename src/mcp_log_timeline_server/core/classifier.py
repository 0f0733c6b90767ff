"""Line classification and normalization.

Each line is offered to the pattern registry in priority order; the first
pattern that accepts it supplies a PartialRecord, which is turned into a
NormalizedRecord here and only here (default source, level and message).
"""

from __future__ import annotations

from datetime import datetime

from .formats import CompositeParser, ParseContext, default_parser, to_utc
from .models import DEFAULT_SOURCE, ContinuationState, NormalizedRecord, PartialRecord, Severity

UNMATCHED = "unmatched"


def normalize(
    partial: PartialRecord,
    *,
    line: str,
    timestamp: datetime,
    origin_file: str,
    format_name: str,
) -> NormalizedRecord:
    """Apply defaults to a PartialRecord."""
    return NormalizedRecord(
        timestamp=timestamp,
        level=partial.level or Severity.INFORMATION,
        source=(partial.source or "").strip() or DEFAULT_SOURCE,
        message=partial.message or line.strip(),
        origin_file=origin_file,
        format=format_name,
        raw=line,
    )


def classify_line(
    line: str,
    state: ContinuationState,
    *,
    origin_file: str,
    ctx: ParseContext,
    parser: CompositeParser | None = None,
) -> tuple[NormalizedRecord, ContinuationState]:
    """Classify one non-blank line and thread the continuation state.

    Lines that carry their own valid timestamp advance the state; lines that
    don't (catch-all, key-value without a time key, or no match at all)
    inherit the last timestamp seen, or ``ctx.now`` before any was seen.
    """
    parser = parser or default_parser()
    hit = parser.parse(line, ctx=ctx)
    if hit is None:
        format_name, partial = UNMATCHED, PartialRecord()
    else:
        format_name, partial = hit

    if partial.timestamp is not None:
        ts = partial.timestamp
        state = state.advance(ts)
    elif state.last_timestamp is not None:
        ts = state.last_timestamp
    else:
        ts = to_utc(ctx.now, default_tz=ctx.default_tz)

    record = normalize(
        partial,
        line=line,
        timestamp=ts,
        origin_file=origin_file,
        format_name=format_name,
    )
    return record, state
