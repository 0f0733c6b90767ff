"""Log line pattern families.

Each parser recognizes one dialect and extracts a PartialRecord; the
CompositeParser tries them in a fixed priority order.
"""

from __future__ import annotations

from .base import LogParser, ParseContext, parse_iso_timestamp, to_utc
from .bracket import AppLogParser, BracketLevelParser
from .composite import CompositeParser
from .dpkg import DpkgLogParser
from .kv import KeyValueParser
from .levels import (
    infer_level_from_message,
    level_from_keyword,
    level_from_windows,
    severity_from_syslog_priority,
)
from .loose import CatchAllParser
from .registry import CATCH_ALL, default_parser
from .syslog import BsdSyslogParser, PidSyslogParser, Rfc3164Parser, Rfc5424Parser
from .windows import WINDOWS_CSV_HEADER_RE, WindowsEventCsvParser

__all__ = [
    "CATCH_ALL",
    "WINDOWS_CSV_HEADER_RE",
    "AppLogParser",
    "BracketLevelParser",
    "BsdSyslogParser",
    "CatchAllParser",
    "CompositeParser",
    "DpkgLogParser",
    "KeyValueParser",
    "LogParser",
    "ParseContext",
    "PidSyslogParser",
    "Rfc3164Parser",
    "Rfc5424Parser",
    "WindowsEventCsvParser",
    "default_parser",
    "infer_level_from_message",
    "level_from_keyword",
    "level_from_windows",
    "parse_iso_timestamp",
    "severity_from_syslog_priority",
    "to_utc",
]
