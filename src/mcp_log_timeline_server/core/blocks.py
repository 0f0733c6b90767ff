"""Multi-line block extraction (apt history.log transactions).

A transaction looks like::

    Start-Date: 2024-01-15  10:30:00
    Commandline: apt-get install -y curl
    Requested-By: alice (1000)
    Install: curl:amd64 (7.81.0-1ubuntu1.15),
      libcurl4:amd64 (7.81.0-1ubuntu1.15, automatic)
    End-Date: 2024-01-15  10:30:05

and becomes one record stamped with its Start-Date.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, tzinfo

from .formats import to_utc
from .models import NormalizedRecord, Severity

BLOCK_FORMAT = "apt_history"
BLOCK_SOURCE = "apt"

_BLOCK_RE = re.compile(
    r"^Start-Date:[ \t]*(?P<start>[^\n]*?)[ \t]*\n"
    r"(?P<header>[^\n]*)\n"
    r"(?P<actions>(?:(?!Start-Date:|End-Date:)[^\n]*\n)+?)"
    r"End-Date:[ \t]*(?P<end>[^\n]*)$",
    re.MULTILINE,
)

_START_FORMATS = ("%Y-%m-%d %H:%M:%S",)


def _parse_start(value: str, *, default_tz: tzinfo) -> datetime | None:
    compact = " ".join(value.split())
    for fmt in _START_FORMATS:
        try:
            return to_utc(datetime.strptime(compact, fmt), default_tz=default_tz)
        except (ValueError, OverflowError):
            continue
    return None


def _flatten_actions(actions: str) -> str:
    """Join action lines and their indented continuations with single spaces."""
    return " ".join(part.strip() for part in actions.splitlines() if part.strip())


def extract_blocks(
    content: str,
    filename: str,
    *,
    default_tz: tzinfo = UTC,
) -> list[NormalizedRecord]:
    """Return one record per Start-Date/End-Date block (possibly none).

    A block whose Start-Date cannot be parsed is skipped; the rest of the file
    is unaffected.
    """
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    if not text.endswith("\n"):
        text += "\n"

    records: list[NormalizedRecord] = []
    for m in _BLOCK_RE.finditer(text):
        ts = _parse_start(m.group("start"), default_tz=default_tz)
        if ts is None:
            continue
        header = m.group("header").strip()
        actions = _flatten_actions(m.group("actions"))
        message = " ".join(part for part in (header, actions) if part)
        records.append(
            NormalizedRecord(
                timestamp=ts,
                level=Severity.INFORMATION,
                source=BLOCK_SOURCE,
                message=message,
                origin_file=filename,
                format=BLOCK_FORMAT,
                raw=m.group(0),
            )
        )
    return records
