"""Process-wide default pattern order."""

from __future__ import annotations

from .bracket import AppLogParser, BracketLevelParser
from .composite import CompositeParser
from .dpkg import DpkgLogParser
from .kv import KeyValueParser
from .loose import CatchAllParser
from .syslog import BsdSyslogParser, PidSyslogParser, Rfc3164Parser, Rfc5424Parser
from .windows import WindowsEventCsvParser

CATCH_ALL = "catch_all"

_DEFAULT_PARSER = CompositeParser(
    parsers=(
        KeyValueParser(),
        PidSyslogParser(),
        Rfc5424Parser(),
        Rfc3164Parser(),
        BsdSyslogParser(),
        WindowsEventCsvParser(),
        AppLogParser(),
        BracketLevelParser(),
        DpkgLogParser(),
        CatchAllParser(),
    )
)


def default_parser() -> CompositeParser:
    """Default parser chain (first match wins, catch-all last)."""
    return _DEFAULT_PARSER
