"""AI parsing schema and configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from pydantic import BaseModel, Field

from ..models import DEFAULT_SOURCE, Severity

MODEL_ENV = "LOG_TIMELINE_AI_MODEL"
CHUNK_LINES_ENV = "LOG_TIMELINE_AI_CHUNK_LINES"


class AIParsedEntry(BaseModel):
    timestamp: str = Field(
        description='ISO 8601 timestamp of the entry (e.g. "2024-01-01T12:00:00.000Z").'
    )
    level: Severity = Field(
        description="Severity; infer from the message when absent, default Information."
    )
    source: str = Field(
        default=DEFAULT_SOURCE,
        description='Process or component that produced the entry, or "Unknown".',
    )
    message: str = Field(description="The main content of the log entry.")


class AIParsedLogFile(BaseModel):
    logs: list[AIParsedEntry] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AIParseConfig:
    model: str = "gemini-2.5-flash-lite"
    chunk_max_lines: int = 200
    temperature: float = 0.0
    max_retries: int = 3
    max_concurrent_requests: int = 3


def resolve_ai_parse_config(cfg: AIParseConfig | None) -> AIParseConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = AIParseConfig()

    model = os.getenv(MODEL_ENV)
    if model:
        cfg = replace(cfg, model=model)

    env = os.getenv(CHUNK_LINES_ENV)
    if env is None or env == "":
        return cfg

    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{CHUNK_LINES_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{CHUNK_LINES_ENV} must be >= 1")
    return replace(cfg, chunk_max_lines=value)
