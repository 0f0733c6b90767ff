"""Parser composition utilities."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..models import PartialRecord
from .base import LogParser, ParseContext


@dataclass(frozen=True, slots=True)
class CompositeParser:
    """Try parsers in order and return the first successful parse.

    Order is priority: a later parser is never consulted once an earlier one
    accepted the line, even if it would extract more fields.
    """

    parsers: Sequence[LogParser]

    def parse(self, line: str, *, ctx: ParseContext) -> tuple[str, PartialRecord] | None:
        """Return (parser name, partial record) from the first parser that accepts the line."""
        for p in self.parsers:
            out = p.parse(line, ctx=ctx)
            if out is not None:
                return p.name, out
        return None

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.parsers]
