"""Windows Event Viewer CSV export parser."""

from __future__ import annotations

import csv
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import PartialRecord
from .base import ParseContext, parse_with_formats
from .levels import level_from_windows

# Event Viewer "Save All Events As... CSV" header row.
WINDOWS_CSV_HEADER_RE = re.compile(
    r'^\ufeff?"?Level"?\s*,\s*"?Date and Time"?\s*,\s*"?Source"?', re.IGNORECASE
)

_DATE_RE = re.compile(r"^\d{1,4}[/\-.]\d{1,2}[/\-.]\d{1,4}[ T]\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?$")


@dataclass(frozen=True, slots=True)
class WindowsEventCsvParser:
    """Parse 'Level,Date and Time,Source,Event ID,Task Category,Message' rows.

    Fields may be quoted; the message keeps any embedded commas.
    """

    name: str = "windows_csv"
    timestamp_formats: Sequence[str] = (
        "%m/%d/%Y %I:%M:%S %p",
        "%m/%d/%Y %I:%M %p",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%d.%m.%Y %H:%M:%S",
        "%Y/%m/%d %H:%M:%S",
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a Windows Event CSV row into a PartialRecord."""
        if "," not in line:
            return None
        try:
            fields = next(csv.reader([line], skipinitialspace=True))
        except (csv.Error, StopIteration):
            return None
        if len(fields) < 6:
            return None

        level_raw, when, source, event_id = (f.strip() for f in fields[:4])
        if not _DATE_RE.match(when) or not event_id.isdigit() or not source:
            return None

        ts = parse_with_formats(when, self.timestamp_formats, default_tz=ctx.default_tz)
        if ts is None:
            return None

        message = ",".join(fields[5:]).strip()
        return PartialRecord(
            timestamp=ts,
            level=level_from_windows(level_raw),
            source=source,
            message=message or None,
        )
