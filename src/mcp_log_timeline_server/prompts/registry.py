"""Workflow prompts for building incident timelines from parsed logs."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_list(values: Sequence[str] | str) -> str:
    """Render a list argument (or a comma-separated string) as a JSON array."""
    raw = values.split(",") if isinstance(values, str) else values
    return json.dumps([str(v).strip() for v in raw if str(v).strip()])


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def build_timeline(
        log_paths: Sequence[str] | str,
        levels: Sequence[str] | str = ("Emergency", "Alert", "Critical", "Error", "Warning"),
    ) -> list[dict[str, Any]]:
        """Build a prompt that reconstructs a cross-file incident timeline."""
        call_block = "\n".join(
            [
                f"- log_paths: {_format_list(log_paths)}",
                f"- levels: {_format_list(levels)}",
                "- include_raw: true",
            ]
        )
        return [
            {
                "role": "system",
                "content": (
                    "You are an incident analyst. Build chronological narratives from "
                    "normalized log events. Do not invent details; if the evidence is "
                    "insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Reconstruct what happened using parse_logs. Follow this workflow:\n"
                    "- Call parse_logs first with the parameters below.\n"
                    "- Pass log_paths and levels as list[str], not comma-separated strings.\n"
                    "- Check the files field: mention any file reported with an error or a "
                    "warning about an unrecognized format, since its timestamps may be "
                    "inaccurate.\n"
                    "- Entries are already sorted by timestamp across files; keep that order.\n\n"
                    "Call parse_logs with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Timeline (one bullet per notable event: time, source, level, message)\n"
                    "2) Hot spots (sources or periods with clustered warnings/errors)\n"
                    "3) Likely sequence of cause and effect (say 'Unknown' if unclear)\n"
                ),
            },
        ]

    @mcp.prompt()
    def explain_unrecognized_format(log_path: str) -> list[dict[str, Any]]:
        """Build a prompt for a file the parser flagged as an unsupported format."""
        return [
            {
                "role": "user",
                "content": (
                    f"The parser flagged {log_path} as mostly unrecognized. Read a sample of "
                    "it and describe its line layout: where the timestamp, level, source and "
                    "message are, and which known format (syslog, Windows Event CSV, dpkg, "
                    "key=value, application log) it is closest to. Then call parse_logs with "
                    "include_ai_fallback=true if structured output is still needed."
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "File contents:"},
                    {"type": "resource", "uri": f"log://{log_path}"},
                ],
            },
        ]
