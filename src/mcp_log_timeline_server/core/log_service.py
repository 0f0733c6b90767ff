"""Log loading and file-level parsing.

This module is the main integration point that turns raw file content into
normalized records and decides whether the file as a whole parsed well.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import UTC, datetime, tzinfo
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .blocks import extract_blocks
from .classifier import UNMATCHED, classify_line
from .errors import EmptyInputError, NoRecognizableEntriesError, unsupported_format_message
from .formats import CATCH_ALL, WINDOWS_CSV_HEADER_RE, CompositeParser, ParseContext
from .models import ContinuationState, NormalizedRecord, ParseResult

logger = logging.getLogger(__name__)

THRESHOLD_ENV = "LOG_TIMELINE_UNRECOGNIZED_THRESHOLD"
DEFAULT_UNRECOGNIZED_THRESHOLD = 0.5
_UNRECOGNIZED_FORMATS = frozenset({CATCH_ALL, UNMATCHED})


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Knobs for a single file parse."""

    now: datetime | None = None  # reference clock; wall clock when unset
    default_tz: tzinfo = UTC  # applied to timestamps without an offset
    unrecognized_threshold: float | None = None  # env or 0.5 when unset
    strict: bool = False  # raise UnsupportedFormatError instead of warning
    use_blocks: bool = True
    parser: CompositeParser | None = None


def _resolve_threshold(value: float | None) -> float:
    if value is not None:
        if not 0.0 <= value <= 1.0:
            raise ValueError("unrecognized_threshold must be between 0 and 1")
        return value

    env = os.getenv(THRESHOLD_ENV)
    if env:
        try:
            parsed = float(env)
        except ValueError as exc:
            raise ValueError(f"{THRESHOLD_ENV} must be a number") from exc
        if not 0.0 <= parsed <= 1.0:
            raise ValueError(f"{THRESHOLD_ENV} must be between 0 and 1")
        return parsed

    return DEFAULT_UNRECOGNIZED_THRESHOLD


def resolve_parse_options(options: ParseOptions | None) -> ParseOptions:
    """Return options with the clock pinned and env overrides applied."""
    options = options or ParseOptions()
    return replace(
        options,
        now=options.now or datetime.now(UTC),
        unrecognized_threshold=_resolve_threshold(options.unrecognized_threshold),
    )


def _parse_lines(
    content: str,
    filename: str,
    *,
    ctx: ParseContext,
    parser: CompositeParser | None,
    result: ParseResult,
) -> None:
    """Classify every non-blank line, threading the continuation state."""
    state = ContinuationState()
    records = result.records
    # Records seen before the first timestamped line; stamped once it shows up.
    pending: list[int] = []

    for line in content.splitlines():
        if not line.strip():
            continue
        if WINDOWS_CSV_HEADER_RE.match(line):
            continue
        result.total_lines += 1

        had_timestamp = state.last_timestamp is not None
        record, state = classify_line(
            line,
            state,
            origin_file=filename,
            ctx=ctx,
            parser=parser,
        )
        if record.format in _UNRECOGNIZED_FORMATS:
            result.unrecognized_count += 1

        if state.last_timestamp is None:
            pending.append(len(records))
        elif not had_timestamp and pending:
            for idx in pending:
                records[idx] = replace(records[idx], timestamp=state.last_timestamp)
            pending = []

        records.append(record)


def parse_log_content(
    content: str,
    filename: str,
    *,
    options: ParseOptions | None = None,
) -> ParseResult:
    """Parse one file's text into normalized records (file-scan order).

    Raises EmptyInputError for blank content and NoRecognizableEntriesError
    when nothing could be extracted. A file whose lines mostly fell through to
    the catch-all is returned with a warning, or raises UnsupportedFormatError
    when ``options.strict`` is set.
    """
    if not content.strip():
        raise EmptyInputError(filename)

    opts = resolve_parse_options(options)
    ctx = ParseContext(now=opts.now, default_tz=opts.default_tz)
    result = ParseResult(
        filename=filename,
        records=[],
        threshold=opts.unrecognized_threshold,
    )

    blocks: list[NormalizedRecord] = []
    if opts.use_blocks:
        blocks = extract_blocks(content, filename, default_tz=opts.default_tz)

    if blocks:
        # Block-structured files skip line parsing entirely.
        result.records.extend(blocks)
        result.block_count = len(blocks)
        result.total_lines = sum(1 for line in content.splitlines() if line.strip())
    else:
        _parse_lines(content, filename, ctx=ctx, parser=opts.parser, result=result)

    if not result.records:
        raise NoRecognizableEntriesError(filename)

    logger.debug(
        "Parsed %s: %d records (%d blocks, %d unrecognized of %d lines)",
        filename,
        len(result.records),
        result.block_count,
        result.unrecognized_count,
        result.total_lines,
    )

    if result.unsupported_format:
        message = unsupported_format_message(filename, result)
        result.warnings.append(message)
        logger.warning(message)
        if opts.strict:
            result.raise_for_quality()

    return result


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


async def read_log_text(
    log_path: str | Path,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> str:
    """Read a whole log file as text."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        return await f.read()


async def parse_log_file(
    log_path: str | Path,
    *,
    options: ParseOptions | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> ParseResult:
    """Read a file and parse it; the origin filename is the file's name."""
    path = Path(log_path)
    content = await read_log_text(path, encoding=encoding, decode_errors=decode_errors)
    return await asyncio.to_thread(parse_log_content, content, path.name, options=options)
