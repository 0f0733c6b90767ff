from __future__ import annotations

from datetime import UTC, datetime

import pytest

from mcp_log_timeline_server.core.ai_parse import (
    AIParseConfig,
    AIParsedEntry,
    AIParsedLogFile,
    ai_parse_content,
    resolve_ai_parse_config,
)
from mcp_log_timeline_server.core.ai_parse import service as ai_service
from mcp_log_timeline_server.core.ai_parse.prompt import build_ai_parse_prompt
from mcp_log_timeline_server.core.ai_parse.service import _chunk_lines
from mcp_log_timeline_server.core.errors import EmptyInputError, NoRecognizableEntriesError
from mcp_log_timeline_server.core.models import Severity


def test_chunk_lines_skips_blank_lines() -> None:
    content = "a\n\nb\nc\n   \nd\ne\n"
    assert _chunk_lines(content, 2) == ["a\nb", "c\nd", "e"]


def test_prompt_embeds_lines() -> None:
    prompt = build_ai_parse_prompt("line one\nline two")
    assert "line one\nline two" in prompt


def test_resolve_config_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_TIMELINE_AI_MODEL", "gemini-test")
    monkeypatch.setenv("LOG_TIMELINE_AI_CHUNK_LINES", "50")

    cfg = resolve_ai_parse_config(None)

    assert cfg.model == "gemini-test"
    assert cfg.chunk_max_lines == 50


@pytest.mark.parametrize(("value", "message"), [("x", "must be an integer"), ("0", "must be >= 1")])
def test_resolve_config_rejects_bad_chunk_size(
    monkeypatch: pytest.MonkeyPatch, value: str, message: str
) -> None:
    monkeypatch.setenv("LOG_TIMELINE_AI_CHUNK_LINES", value)
    with pytest.raises(ValueError, match=message):
        resolve_ai_parse_config(AIParseConfig())


def test_missing_api_key_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        ai_service._call_gemini_json("prompt", cfg=AIParseConfig())


@pytest.mark.asyncio
async def test_ai_parse_content_normalizes_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    prompts: list[str] = []

    def fake_call(prompt: str, *, cfg) -> AIParsedLogFile:
        prompts.append(prompt)
        return AIParsedLogFile(
            logs=[
                AIParsedEntry(
                    timestamp="2024-05-01T09:00:00Z",
                    level=Severity.WARNING,
                    source="  ",
                    message=" cache miss storm ",
                ),
                AIParsedEntry(timestamp="not a date", level=Severity.ERROR, message="dropped"),
                AIParsedEntry(timestamp="2024-05-01T09:00:01Z", level=Severity.ERROR, message=""),
            ]
        )

    monkeypatch.setattr(ai_service, "_call_gemini_json", fake_call)

    records = await ai_parse_content(
        "odd line one\nodd line two\nodd line three\n",
        "weird.log",
        cfg=AIParseConfig(chunk_max_lines=2),
    )

    assert len(prompts) == 2
    assert len(records) == 2
    first = records[0]
    assert first.timestamp == datetime(2024, 5, 1, 9, 0, 0, tzinfo=UTC)
    assert first.level == Severity.WARNING
    assert first.source == "Unknown"
    assert first.message == "cache miss storm"
    assert first.origin_file == "weird.log"
    assert first.format == "ai"


@pytest.mark.asyncio
async def test_ai_parse_content_empty_input() -> None:
    with pytest.raises(EmptyInputError):
        await ai_parse_content("  \n", "empty.log")


@pytest.mark.asyncio
async def test_ai_parse_content_nothing_usable(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_call(prompt: str, *, cfg) -> AIParsedLogFile:
        return AIParsedLogFile(logs=[])

    monkeypatch.setattr(ai_service, "_call_gemini_json", fake_call)

    with pytest.raises(NoRecognizableEntriesError):
        await ai_parse_content("something\n", "weird.log")
