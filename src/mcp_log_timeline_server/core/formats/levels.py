"""Severity lookup tables shared by the pattern families."""

from __future__ import annotations

from ..models import Severity

_SYSLOG_SEVERITIES: tuple[Severity, ...] = (
    Severity.EMERGENCY,  # 0
    Severity.ALERT,  # 1
    Severity.CRITICAL,  # 2
    Severity.ERROR,  # 3
    Severity.WARNING,  # 4
    Severity.NOTICE,  # 5
    Severity.INFORMATION,  # 6
    Severity.DEBUG,  # 7
)

# Most severe first: a message mentioning both "warning" and "error" is an Error.
_MESSAGE_KEYWORDS: tuple[tuple[Severity, tuple[str, ...]], ...] = (
    (Severity.EMERGENCY, ("emergency",)),
    (Severity.ALERT, ("alert",)),
    (Severity.CRITICAL, ("critical", "crit")),
    (Severity.ERROR, ("error", "err", "fail", "failure")),
    (Severity.WARNING, ("warning", "warn")),
    (Severity.NOTICE, ("notice",)),
    (Severity.DEBUG, ("debug",)),
    (Severity.VERBOSE, ("verbose",)),
)

# Substring table for explicit level tokens ("WARNING" and "WARN" both hit WARN).
_LEVEL_TOKENS: tuple[tuple[str, Severity], ...] = (
    ("INFO", Severity.INFORMATION),
    ("WARN", Severity.WARNING),
    ("ERR", Severity.ERROR),
    ("CRIT", Severity.CRITICAL),
    ("FATAL", Severity.CRITICAL),
    ("ALERT", Severity.ALERT),
    ("EMERG", Severity.EMERGENCY),
    ("DEBUG", Severity.DEBUG),
    ("TRACE", Severity.VERBOSE),
    ("VERBOSE", Severity.VERBOSE),
    ("NOTICE", Severity.NOTICE),
)

_WINDOWS_LEVELS = {
    "information": Severity.INFORMATION,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
    "critical": Severity.CRITICAL,
    "verbose": Severity.VERBOSE,
}


def severity_from_syslog_priority(pri: int) -> Severity:
    """Map a syslog PRI value to a severity (severity = PRI mod 8)."""
    return _SYSLOG_SEVERITIES[pri % 8]


def infer_level_from_message(message: str) -> Severity:
    """Guess a severity from free text for formats without a level field."""
    lower = message.lower()
    for level, keywords in _MESSAGE_KEYWORDS:
        if any(k in lower for k in keywords):
            return level
    return Severity.INFORMATION


def level_from_keyword(token: str) -> Severity:
    """Map an explicit level token (INFO, WARN, E_ERROR, ...) to a severity."""
    upper = token.strip().upper()
    for needle, level in _LEVEL_TOKENS:
        if needle in upper:
            return level
    return Severity.INFORMATION


def level_from_windows(value: str) -> Severity:
    """Map a Windows Event Log level name to a severity."""
    return _WINDOWS_LEVELS.get(value.strip().lower(), Severity.INFORMATION)
