"""FastMCP server for the log timeline tools.

Exposes parse_logs, summarize_logs and list_formats plus the resources and
prompts registered in their own modules. Started over stdio by
`mcp-log-timeline-server` or `python -m mcp_log_timeline_server`.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_timeline_server.prompts.registry import register_prompts
from mcp_log_timeline_server.resources.registry import register_resources
from mcp_log_timeline_server.tools.timeline import (
    list_formats_impl,
    parse_logs_impl,
    summarize_logs_impl,
)

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "LOG_TIMELINE_LOG_LEVEL"


def _configure_logging() -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        stream=sys.stderr,  # stdout is the MCP channel
        level=logging.getLevelNamesMapping().get(level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("log-timeline", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def parse_logs(
    log_paths: Sequence[str],
    levels: Sequence[str] | None = None,
    sources: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
    strict: bool = False,
    include_ai_fallback: bool = False,
) -> dict[str, Any]:
    """Parse one or more log files into a single time-ordered event list.

    Parameters
    ----------
    log_paths:
        Paths to local log files (plain text or .gz). Syslog, Windows Event CSV,
        dpkg/apt, key=value and common application formats are recognized.
    levels:
        Keep only these severities, e.g. ["Error", "warning"] (any case).
    sources:
        Filter by exact source names (see the "sources" field of a previous call).
    contains:
        Case-insensitive substring filter on the message.
    limit:
        Cap on returned entries (default 500, never more than 10000).
    include_raw:
        Add the source line (or whole block) as "raw" to each entry.
    strict:
        Reject files whose lines mostly matched no known format instead of
        returning them with a warning.
    include_ai_fallback:
        Re-parse such files with the AI parser (needs GEMINI_API_KEY).

    Returns
    -------
    dict:
        {"count", "total", "entries", "sources", "files", "summary"}
    """
    return await parse_logs_impl(
        log_paths=log_paths,
        levels=levels,
        sources=sources,
        contains=contains,
        limit=limit,
        include_raw=include_raw,
        strict=strict,
        include_ai_fallback=include_ai_fallback,
    )


@mcp.tool()
async def summarize_logs(log_paths: Sequence[str]) -> dict[str, Any]:
    """Return event totals, warning/error counts and per-source counts for log files."""
    return await summarize_logs_impl(log_paths=log_paths)


@mcp.tool()
def list_formats() -> dict[str, Any]:
    """List the recognized log formats in the order they are tried."""
    return list_formats_impl()


def main() -> None:
    _configure_logging()
    logger.info("log-timeline MCP server listening on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
