"""Key-value (logfmt style) parser for lines with an explicit ``level=`` field."""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from ..models import PartialRecord, Severity
from .base import ParseContext, parse_iso_timestamp
from .levels import level_from_keyword

TIME_KEYS: Sequence[str] = ("timestamp", "time", "ts", "@timestamp", "date")
LEVEL_KEYS: Sequence[str] = ("level", "severity", "lvl", "log_level", "loglevel")
MESSAGE_KEYS: Sequence[str] = ("msg", "message", "error", "detail")
SOURCE_KEYS: Sequence[str] = ("source", "app", "component", "logger", "service", "module", "name")

_LEVEL_KEY_RE = re.compile(
    r"(?:^|\s)(?:" + "|".join(re.escape(k) for k in LEVEL_KEYS) + r")=\S", re.IGNORECASE
)
_KEY_RE = re.compile(r"^[\w.@\-]+$")
_LEADING_TS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")


def split_pairs(line: str) -> list[tuple[str, str]] | None:
    """Split a logfmt line into ordered (key, value) pairs, honoring quotes."""
    try:
        tokens = shlex.split(line, posix=True)
    except ValueError:
        return None

    pairs: list[tuple[str, str]] = []
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not _KEY_RE.match(key):
            pairs.append(("", token))
            continue
        pairs.append((key, value))
    return pairs


def _first(fields: Mapping[str, str], keys: Sequence[str]) -> tuple[str | None, str | None]:
    for key in keys:
        val = fields.get(key)
        if val:
            return key, val
    return None, None


@dataclass(frozen=True, slots=True)
class KeyValueParser:
    """Parse 'time=... level=WARN source=api msg="..." extra=1' lines."""

    name: str = "key_value"

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a key-value line into a PartialRecord."""
        if not _LEVEL_KEY_RE.search(line):
            return None
        pairs = split_pairs(line)
        if not pairs:
            return None

        # Only a leading ISO timestamp may stand without a key:
        # "2025-01-01T10:00:00Z level=info msg=up"
        leading_ts: datetime | None = None
        if not pairs[0][0]:
            if not _LEADING_TS_RE.match(pairs[0][1]):
                return None
            leading_ts = parse_iso_timestamp(pairs[0][1], default_tz=ctx.default_tz)
            if leading_ts is None:
                return None
            pairs = pairs[1:]
        if any(not k for k, _ in pairs):
            return None

        lower = {k.lower(): v for k, v in pairs}
        level_key, level_raw = _first(lower, LEVEL_KEYS)
        if level_raw is None:
            return None

        ts = leading_ts
        time_key, time_raw = _first(lower, TIME_KEYS)
        if time_raw is not None:
            ts = parse_iso_timestamp(time_raw, default_tz=ctx.default_tz)
            if ts is None:
                return None

        source_key, source = _first(lower, SOURCE_KEYS)
        message_key, message = _first(lower, MESSAGE_KEYS)

        consumed = {level_key, time_key, source_key, message_key}
        extras = [f"{k}={v}" for k, v in pairs if k.lower() not in consumed]
        text = " ".join(part for part in [message or "", *extras] if part)

        level: Severity = level_from_keyword(level_raw)
        return PartialRecord(
            timestamp=ts,
            level=level,
            source=source,
            message=text or None,
        )
