"""Package-manager log parser (dpkg.log and friends)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..models import PartialRecord
from .base import ParseContext, to_utc
from .levels import infer_level_from_message


@dataclass(frozen=True, slots=True)
class DpkgLogParser:
    """Parse 'YYYY-MM-DD HH:MM:SS rest-of-line' lines with a fixed source."""

    name: str = "dpkg"
    source: str = "dpkg"

    _re = re.compile(r"^(?P<ts>\d{4}-\d{2}-\d{2}\s\d{2}:\d{2}:\d{2})\s+(?P<msg>.*)$")

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a package-manager line into a PartialRecord."""
        m = self._re.match(line)
        if not m:
            return None
        try:
            ts = to_utc(
                datetime.strptime(m.group("ts"), "%Y-%m-%d %H:%M:%S"),
                default_tz=ctx.default_tz,
            )
        except (ValueError, OverflowError):
            return None
        msg = m.group("msg").strip()
        return PartialRecord(
            timestamp=ts,
            level=infer_level_from_message(msg),
            source=self.source,
            message=msg or None,
        )
