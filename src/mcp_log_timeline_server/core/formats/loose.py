"""Catch-all parser for lines no structured pattern recognized."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import PartialRecord
from .base import ParseContext
from .levels import infer_level_from_message


@dataclass(frozen=True, slots=True)
class CatchAllParser:
    """Accept any non-empty line; the timestamp comes from the continuation state.

    ``source`` stays unset unless configured (e.g. "boot" for boot.log), so the
    record ends up with the default source.
    """

    name: str = "catch_all"
    source: str | None = None

    def parse(self, line: str, *, ctx: ParseContext) -> PartialRecord | None:
        """Wrap a non-empty line, inferring the level from its text."""
        text = line.strip()
        if not text:
            return None
        return PartialRecord(
            timestamp=None,
            level=infer_level_from_message(text),
            source=self.source,
            message=text,
        )
