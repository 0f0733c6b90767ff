"""Timestamped application log parsers with explicit level tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..models import PartialRecord
from .base import ParseContext, parse_iso_timestamp
from .levels import level_from_keyword

_TS = (
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}"
    r"(?:[.,]\d+)?"
    r"(?:Z|[+-]\d{2}:?\d{2})?"
)


def _parse_app_ts(value: str, ctx: ParseContext) -> datetime | None:
    # Java/log4j style millis use a comma: 2024-01-01 12:00:00,123
    return parse_iso_timestamp(value.replace(",", "."), default_tz=ctx.default_tz)


@dataclass(frozen=True, slots=True)
class AppLogParser:
    """Parse '<timestamp> LEVEL [source] message' lines (log4j, logback, python logging)."""

    name: str = "app_log"

    _re = re.compile(
        r"^(?P<ts>" + _TS + r")\s+"
        r"(?P<level>[A-Z]+)\s+"
        r"\[(?P<source>[^\]]+)\]\s+"
        r"(?P<msg>.*)$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse an application log line into a PartialRecord."""
        m = self._re.match(line)
        if not m:
            return None
        ts = _parse_app_ts(m.group("ts"), ctx)
        if ts is None:
            return None
        return PartialRecord(
            timestamp=ts,
            level=level_from_keyword(m.group("level")),
            source=m.group("source").strip() or None,
            message=m.group("msg").strip() or None,
        )


@dataclass(frozen=True, slots=True)
class BracketLevelParser:
    """Parse '<timestamp> [LEVEL] message' lines."""

    name: str = "bracket_level"
    default_source: str = "Application"

    _re = re.compile(
        r"^(?P<ts>" + _TS + r"|[0-9T:.\-+Z]+)\s+"
        r"\[(?P<level>[A-Za-z]+)\]\s+"
        r"(?P<msg>.*)$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a bracketed-level line into a PartialRecord."""
        m = self._re.match(line)
        if not m:
            return None
        ts = _parse_app_ts(m.group("ts"), ctx)
        if ts is None:
            return None
        return PartialRecord(
            timestamp=ts,
            level=level_from_keyword(m.group("level")),
            source=self.default_source,
            message=m.group("msg").strip() or None,
        )
