"""File-level parse failures surfaced to callers.

Per-line problems (bad dates, lines matching nothing) are recovered inside the
classifier and never show up here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ParseResult


class LogParseError(ValueError):
    """Base class for file-level parse failures."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename


class EmptyInputError(LogParseError):
    """Content is empty or whitespace only."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            filename,
            f"The log file '{filename}' is empty or contains only whitespace.",
        )


class NoRecognizableEntriesError(LogParseError):
    """The full scan produced zero records."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            filename,
            f"Could not parse any recognizable log entries in '{filename}'. "
            "Please check the file format.",
        )


class UnsupportedFormatError(LogParseError):
    """Most lines only matched the catch-all pattern.

    The partial result stays available on ``result`` so callers can decide to
    keep or drop it.
    """

    def __init__(self, filename: str, *, result: ParseResult) -> None:
        super().__init__(filename, unsupported_format_message(filename, result))
        self.result = result


def unsupported_format_message(filename: str, result: ParseResult) -> str:
    pct = round(result.unrecognized_ratio * 100)
    return (
        f"Most entries in '{filename}' could not be matched to a known log format "
        f"({result.unrecognized_count}/{len(result.records)} lines, {pct}%). "
        "Check the format; timestamps may be inaccurate."
    )
