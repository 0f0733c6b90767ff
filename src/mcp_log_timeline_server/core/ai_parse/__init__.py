"""AI-assisted parsing for log dialects the pattern registry does not know."""

from __future__ import annotations

from .models import AIParseConfig, AIParsedEntry, AIParsedLogFile, resolve_ai_parse_config
from .service import ai_parse_content

__all__ = [
    "AIParseConfig",
    "AIParsedEntry",
    "AIParsedLogFile",
    "ai_parse_content",
    "resolve_ai_parse_config",
]
