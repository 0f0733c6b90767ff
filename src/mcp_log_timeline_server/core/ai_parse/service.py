"""Model-backed parsing.

Sends raw log text to Gemini in chunks and normalizes the structured reply
into the same records the pattern registry produces.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from datetime import UTC, tzinfo

from ..errors import EmptyInputError, NoRecognizableEntriesError
from ..formats import parse_iso_timestamp
from ..models import DEFAULT_SOURCE, NormalizedRecord
from .models import AIParseConfig, AIParsedLogFile, resolve_ai_parse_config
from .prompt import build_ai_parse_prompt

logger = logging.getLogger(__name__)
_AI_PARSE_SCHEMA = AIParsedLogFile.model_json_schema()

AI_FORMAT = "ai"


def _chunk_lines(content: str, max_lines: int) -> list[str]:
    """Split content into chunks of at most ``max_lines`` non-blank lines."""
    lines = [line for line in content.splitlines() if line.strip()]
    return ["\n".join(lines[i : i + max_lines]) for i in range(0, len(lines), max_lines)]


def _call_gemini_json(prompt: str, *, cfg: AIParseConfig) -> AIParsedLogFile:
    """Call Gemini and validate the response against the schema."""
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise RuntimeError("Missing GEMINI_API_KEY (or GOOGLE_API_KEY).")

    try:
        from google import genai
    except ImportError as e:  # pragma: no cover
        raise RuntimeError(
            "google-genai is required for AI parsing. Install with: pip install '.[ai]'"
        ) from e

    client = genai.Client(api_key=api_key)

    last_err: Exception | None = None
    for attempt in range(1, cfg.max_retries + 1):
        try:
            resp = client.models.generate_content(
                model=cfg.model,
                contents=prompt,
                config={
                    "response_mime_type": "application/json",
                    "response_json_schema": _AI_PARSE_SCHEMA,
                    "temperature": cfg.temperature,
                },
            )
            return AIParsedLogFile.model_validate_json(resp.text)
        except Exception as e:
            last_err = e
            if attempt >= cfg.max_retries:
                break
            sleep_s = min(8, 2 ** (attempt - 1))
            logger.warning("Gemini call failed (attempt %s/%s): %s", attempt, cfg.max_retries, e)
            time.sleep(sleep_s)

    raise RuntimeError(
        f"Gemini call failed after {cfg.max_retries} attempts: {last_err}"
    ) from last_err


async def ai_parse_content(
    content: str,
    filename: str,
    *,
    cfg: AIParseConfig | None = None,
    default_tz: tzinfo = UTC,
) -> list[NormalizedRecord]:
    """Parse content with the model; entries without a valid timestamp are dropped."""
    if not content.strip():
        raise EmptyInputError(filename)

    cfg = resolve_ai_parse_config(cfg)
    semaphore = asyncio.Semaphore(cfg.max_concurrent_requests)

    async def run(chunk: str) -> AIParsedLogFile:
        prompt = build_ai_parse_prompt(chunk)
        async with semaphore:
            return await asyncio.to_thread(_call_gemini_json, prompt, cfg=cfg)

    responses = await asyncio.gather(
        *(run(chunk) for chunk in _chunk_lines(content, cfg.chunk_max_lines))
    )

    records: list[NormalizedRecord] = []
    dropped = 0
    for resp in responses:
        for entry in resp.logs:
            ts = parse_iso_timestamp(entry.timestamp, default_tz=default_tz)
            message = entry.message.strip()
            if ts is None or not message:
                dropped += 1
                continue
            records.append(
                NormalizedRecord(
                    timestamp=ts,
                    level=entry.level,
                    source=entry.source.strip() or DEFAULT_SOURCE,
                    message=message,
                    origin_file=filename,
                    format=AI_FORMAT,
                )
            )

    if dropped:
        logger.debug("Dropped %d AI entries from %s without a valid timestamp", dropped, filename)
    if not records:
        raise NoRecognizableEntriesError(filename)
    return records
