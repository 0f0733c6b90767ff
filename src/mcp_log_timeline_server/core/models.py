"""Core data models for log timeline normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .errors import UnsupportedFormatError


class Severity(str, Enum):
    """Normalized severity levels shared by every log dialect."""

    EMERGENCY = "Emergency"
    ALERT = "Alert"
    CRITICAL = "Critical"
    ERROR = "Error"
    WARNING = "Warning"
    NOTICE = "Notice"
    INFORMATION = "Information"
    DEBUG = "Debug"
    VERBOSE = "Verbose"


DEFAULT_SOURCE = "Unknown"


@dataclass(frozen=True, slots=True)
class PartialRecord:
    """Fields a single pattern managed to extract; any subset may be missing."""

    timestamp: datetime | None = None  # None means the line carries no timestamp of its own
    level: Severity | None = None
    source: str | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """Canonical, schema-complete record handed to timeline consumers."""

    timestamp: datetime
    level: Severity
    source: str
    message: str
    origin_file: str
    sequence_id: int | None = None  # assigned by merge_records, never by the parser
    format: str | None = None  # name of the pattern (or "block") that produced it
    raw: str | None = None


@dataclass(frozen=True, slots=True)
class ContinuationState:
    """Last valid timestamp seen while scanning one file."""

    last_timestamp: datetime | None = None

    def advance(self, ts: datetime) -> ContinuationState:
        """Return the state after a line carrying its own timestamp."""
        return ContinuationState(last_timestamp=ts)


@dataclass(slots=True)
class ParseResult:
    """Outcome of parsing one file."""

    filename: str
    records: list[NormalizedRecord]
    total_lines: int = 0
    unrecognized_count: int = 0
    block_count: int = 0
    threshold: float = 0.5
    warnings: list[str] = field(default_factory=list)

    @property
    def unrecognized_ratio(self) -> float:
        if not self.records:
            return 0.0
        return self.unrecognized_count / len(self.records)

    @property
    def unsupported_format(self) -> bool:
        return self.unrecognized_ratio > self.threshold

    @property
    def warning(self) -> str | None:
        return self.warnings[0] if self.warnings else None

    def raise_for_quality(self) -> None:
        """Raise UnsupportedFormatError if most lines fell through to the catch-all."""
        if self.unsupported_format:
            raise UnsupportedFormatError(self.filename, result=self)
