"""Bodies of the MCP tools.

Inputs are validated here, files go through the core parser one by one, and
the merged timeline comes back as plain JSON-ready dicts.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from mcp_log_timeline_server.core.ai_parse import ai_parse_content
from mcp_log_timeline_server.core.blocks import BLOCK_FORMAT
from mcp_log_timeline_server.core.errors import LogParseError
from mcp_log_timeline_server.core.formats import default_parser
from mcp_log_timeline_server.core.log_service import ParseOptions, parse_log_file, read_log_text
from mcp_log_timeline_server.core.models import NormalizedRecord, Severity
from mcp_log_timeline_server.core.timeline import (
    TimelineSummary,
    available_sources,
    filter_records,
    merge_records,
    summarize_records,
)

DEFAULT_LIMIT = 500
HARD_LIMIT = 10000
ALL_LEVELS = [level.value for level in Severity]


def _parse_levels(levels: Sequence[str] | None) -> list[Severity] | None:
    """Parse user-supplied severity names into Severity enums (case-insensitive)."""
    if not levels:
        return None
    by_name = {level.value.lower(): level for level in Severity}
    by_name.update({level.name.lower(): level for level in Severity})
    out: list[Severity] = []
    for s in levels:
        name = s.strip().lower()
        if not name:
            continue
        try:
            out.append(by_name[name])
        except KeyError as e:
            valid = ", ".join(ALL_LEVELS)
            raise ValueError(
                f"Unknown log level '{s}'. Valid values: {valid}. "
                "Tip: levels is case-insensitive (e.g., 'error', 'WARNING')."
            ) from e
    return out or None


def _record_to_dict(record: NormalizedRecord, *, include_raw: bool) -> dict[str, Any]:
    """Convert a NormalizedRecord into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "id": record.sequence_id,
        "timestamp": record.timestamp.isoformat(),
        "level": record.level.value,
        "source": record.source,
        "message": record.message,
        "filename": record.origin_file,
        "format": record.format,
    }
    if include_raw and record.raw is not None:
        d["raw"] = record.raw
    return d


def _summary_to_dict(summary: TimelineSummary) -> dict[str, Any]:
    return {
        "total": summary.total,
        "warnings": summary.warnings,
        "errors": summary.errors,
        "by_level": {level.value: n for level, n in summary.by_level.items()},
        "by_source": summary.by_source,
        "first": summary.first.isoformat() if summary.first else None,
        "last": summary.last.isoformat() if summary.last else None,
    }


async def _load_records(
    log_paths: Sequence[str],
    *,
    strict: bool,
    include_ai_fallback: bool,
    now: datetime | None,
) -> tuple[list[NormalizedRecord], list[dict[str, Any]]]:
    """Parse files one after another and merge them into a single timeline."""
    if not log_paths:
        raise ValueError("At least one log path is required.")

    merged: list[NormalizedRecord] = []
    files: list[dict[str, Any]] = []
    for log_path in log_paths:
        name = Path(log_path).name
        try:
            result = await parse_log_file(log_path, options=ParseOptions(strict=strict, now=now))
        except LogParseError as e:
            files.append({"filename": name, "count": 0, "error": str(e)})
            continue

        records: list[NormalizedRecord] = result.records
        used_ai = False
        ai_error: str | None = None
        if include_ai_fallback and result.unsupported_format:
            content = await read_log_text(log_path)
            try:
                records = await ai_parse_content(content, name)
                used_ai = True
            except (LogParseError, RuntimeError) as e:
                # Keep the pattern records; the file stays flagged.
                ai_error = str(e)

        merged = merge_records(merged, records)
        info: dict[str, Any] = {"filename": name, "count": len(records)}
        if result.warning and not used_ai:
            info["warning"] = result.warning
        if used_ai:
            info["ai_parsed"] = True
        if ai_error:
            info["ai_error"] = ai_error
        files.append(info)

    if not merged:
        errors = "; ".join(f["error"] for f in files if "error" in f)
        raise ValueError(errors or "No log entries could be parsed.")
    return merged, files


async def parse_logs_impl(
    *,
    log_paths: Sequence[str],
    levels: Sequence[str] | None = None,
    sources: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
    strict: bool = False,
    include_ai_fallback: bool = False,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Implementation for the `parse_logs` MCP tool.

    Notes
    -----
    - Files are parsed in the given order; ids continue across files and the
      combined timeline is sorted by timestamp.
    - A file that fails to parse is reported under ``files`` with an
      ``error``; the call only fails when no file produced records.
    - ``limit`` applies after filtering and is hard-capped.
    """
    if strict and include_ai_fallback:
        raise ValueError(
            "strict and include_ai_fallback cannot be combined: strict rejects the "
            "files the AI fallback would re-parse."
        )
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    sev = _parse_levels(levels)
    merged, files = await _load_records(
        log_paths,
        strict=strict,
        include_ai_fallback=include_ai_fallback,
        now=now,
    )

    selected = filter_records(merged, levels=sev, sources=sources, contains=contains)
    return {
        "count": min(len(selected), limit),
        "total": len(merged),
        "entries": [_record_to_dict(r, include_raw=include_raw) for r in selected[:limit]],
        "sources": available_sources(merged),
        "files": files,
        "summary": _summary_to_dict(summarize_records(selected)),
    }


async def summarize_logs_impl(
    *,
    log_paths: Sequence[str],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Implementation for the `summarize_logs` MCP tool."""
    merged, files = await _load_records(
        log_paths,
        strict=False,
        include_ai_fallback=False,
        now=now,
    )
    return {
        "files": files,
        "sources": available_sources(merged),
        "summary": _summary_to_dict(summarize_records(merged)),
    }


def list_formats_impl() -> dict[str, Any]:
    """Return the recognized formats in priority order."""
    return {
        "block_formats": [BLOCK_FORMAT],
        "line_formats": default_parser().names,
        "levels": ALL_LEVELS,
    }
