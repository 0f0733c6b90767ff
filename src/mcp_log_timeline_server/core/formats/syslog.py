"""Syslog parsers (ISO-with-PID, RFC5424, RFC3164, BSD without PRI)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import PartialRecord
from .base import ParseContext, parse_iso_timestamp, parse_yearless_timestamp
from .levels import infer_level_from_message, severity_from_syslog_priority

_PID_SUFFIX_RE = re.compile(r"\[\d+\]$")


def strip_pid(tag: str) -> str:
    """Turn 'sshd[1234]' into 'sshd'."""
    return _PID_SUFFIX_RE.sub("", tag.strip())


def _message_or_none(msg: str | None) -> str | None:
    msg = (msg or "").strip().lstrip("\ufeff")
    return msg or None


@dataclass(frozen=True, slots=True)
class PidSyslogParser:
    """Parse '<iso-timestamp> host process[pid]: message' (systemd/rsyslog high precision)."""

    name: str = "syslog_pid"

    _re = re.compile(
        r"^(?P<ts>[0-9T:.\-+Z]+)\s+"
        r"(?P<host>[\w.\-]+)\s+"
        r"(?P<proc>[\w.\-/@]+(?:\[\d+\])?):\s+"
        r"(?P<msg>.*)$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a PID-tagged syslog line; level is inferred from the message."""
        m = self._re.match(line)
        if not m:
            return None
        ts = parse_iso_timestamp(m.group("ts"), default_tz=ctx.default_tz)
        if ts is None:
            return None
        msg = m.group("msg").strip()
        return PartialRecord(
            timestamp=ts,
            level=infer_level_from_message(msg),
            source=strip_pid(m.group("proc")),
            message=msg or None,
        )


@dataclass(frozen=True, slots=True)
class Rfc5424Parser:
    """Parse RFC5424 lines using PRI for severity and APP-NAME for source."""

    name: str = "rfc5424"

    _re = re.compile(
        r"^<(?P<pri>\d{1,3})>1\s+"
        r"(?P<ts>\S+)\s+"
        r"(?P<host>\S+)\s+"
        r"(?P<app>\S+)\s+"
        r"(?P<proc>\S+)\s+"
        r"(?P<msgid>\S+)\s+"
        r"(?P<sd>-|(?:\[[^\]]*\])+)"
        r"(?:\s+(?P<msg>.*))?$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse an RFC5424 line into a PartialRecord."""
        m = self._re.match(line)
        if not m:
            return None
        pri = int(m.group("pri"))
        if pri > 191:
            return None
        ts = parse_iso_timestamp(m.group("ts"), default_tz=ctx.default_tz)
        if ts is None:
            return None
        app = m.group("app")
        return PartialRecord(
            timestamp=ts,
            level=severity_from_syslog_priority(pri),
            source=None if app == "-" else app,
            message=_message_or_none(m.group("msg")),
        )


@dataclass(frozen=True, slots=True)
class Rfc3164Parser:
    """Parse RFC3164 lines; the year is borrowed from the reference clock."""

    name: str = "rfc3164"

    _re = re.compile(
        r"^<(?P<pri>\d{1,3})>"
        r"(?P<ts>[A-Za-z]{3}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+"
        r"(?P<host>[\w.\-]+)\s+"
        r"(?P<tag>[^:]+):\s+"
        r"(?P<msg>.*)$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse an RFC3164 line into a PartialRecord."""
        m = self._re.match(line)
        if not m:
            return None
        pri = int(m.group("pri"))
        if pri > 191:
            return None
        ts = parse_yearless_timestamp(m.group("ts"), ctx=ctx)
        if ts is None:
            return None
        return PartialRecord(
            timestamp=ts,
            level=severity_from_syslog_priority(pri),
            source=strip_pid(m.group("tag")) or None,
            message=_message_or_none(m.group("msg")),
        )


@dataclass(frozen=True, slots=True)
class BsdSyslogParser:
    """Parse /var/log/syslog style lines that carry no PRI ('Oct 11 22:14:15 host sshd[1]: msg')."""

    name: str = "bsd_syslog"

    _re = re.compile(
        r"^(?P<ts>[A-Z][a-z]{2}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+"
        r"(?P<host>[\w.\-]+)\s+"
        r"(?P<tag>[^\s:\[]+(?:\[\d+\])?):\s*"
        r"(?P<msg>.*)$"
    )

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Parse a PRI-less syslog line; level is inferred from the message."""
        m = self._re.match(line)
        if not m:
            return None
        ts = parse_yearless_timestamp(m.group("ts"), ctx=ctx)
        if ts is None:
            return None
        msg = _message_or_none(m.group("msg"))
        return PartialRecord(
            timestamp=ts,
            level=infer_level_from_message(msg or ""),
            source=strip_pid(m.group("tag")),
            message=msg,
        )
