"""Read-only MCP resources: format listing, a sample log, the AI schema and
sandboxed access to log files under LOG_TIMELINE_BASE_DIR.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_timeline_server.core.ai_parse import AIParsedLogFile
from mcp_log_timeline_server.core.log_service import read_log_text
from mcp_log_timeline_server.tools.timeline import list_formats_impl

ALLOWED_FILE_SUFFIXES = {".log", ".txt", ".csv"}
BASE_DIR_ENV = "LOG_TIMELINE_BASE_DIR"

SAMPLE_LOG = (
    "<34>Oct 11 22:14:15 mymachine su: 'su root' failed for lonvick on /dev/pts/8\n"
    "2024-07-23T10:30:00.123Z [ERROR] Failed to connect to database.\n"
    "2024-07-23 10:30:01,456 WARN [pool-1] Retrying connection (attempt 2)\n"
    'time=2024-07-23T10:30:02Z level=info source=api msg="connection restored"\n'
    "    at com.example.Db.connect(Db.java:42)\n"
)


def _sandbox_root() -> Path:
    return Path(os.getenv(BASE_DIR_ENV) or Path.cwd()).resolve()


def _is_allowed_log_name(path: Path) -> bool:
    """Accept .log/.txt/.csv (optionally .gz), bare names and rotations like syslog.1."""
    suffixes = [s.lower() for s in path.suffixes]
    if suffixes and suffixes[-1] == ".gz":
        suffixes.pop()
    if not suffixes:
        return True
    last = suffixes[-1]
    return last in ALLOWED_FILE_SUFFIXES or last[1:].isdigit()


def _resolve_resource_path(path: str) -> Path:
    """Map a resource path onto a readable log file inside the sandbox root."""
    root = _sandbox_root()
    candidate = Path(path).expanduser()
    resolved = (candidate if candidate.is_absolute() else root / candidate).resolve()
    if not resolved.is_relative_to(root):
        raise ValueError(f"{path} is outside {BASE_DIR_ENV} ({root})")
    if not resolved.is_file():
        raise FileNotFoundError(f"Log file not found: {resolved}")
    if not _is_allowed_log_name(resolved):
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"{resolved.name}: unsupported file type (allowed: {allowed}, .gz, rotated or no extension)")
    return resolved


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://log-timeline/help")
    def help_resource() -> str:
        """List the resource URIs this server answers."""
        uris = [
            "app://log-timeline/help",
            "app://log-timeline/formats",
            "app://log-timeline/schemas/ai-parse-response",
            "app://log-timeline/examples/sample-log",
            "file://{path}",
            "log://{path}",
        ]
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        lines = ["Resources:", *(f"- {uri}" for uri in uris), ""]
        lines.append(
            f"file:// and log:// read files under {_sandbox_root()} "
            f"(set {BASE_DIR_ENV} to change it); allowed: {allowed}, .gz, rotated or no extension."
        )
        return "\n".join(lines) + "\n"

    @mcp.resource("app://log-timeline/formats")
    def formats() -> dict[str, Any]:
        """Return the recognized formats in priority order."""
        return list_formats_impl()

    @mcp.resource("app://log-timeline/examples/sample-log")
    def sample_log() -> str:
        """Return a small mixed-format sample log for demos and tests."""
        return SAMPLE_LOG

    @mcp.resource("app://log-timeline/schemas/ai-parse-response")
    def ai_parse_schema() -> dict[str, Any]:
        """Return the JSON schema the AI parser must answer with."""
        return AIParsedLogFile.model_json_schema()

    @mcp.resource("file://{path}")
    async def file_contents(path: str) -> str:
        """Raw text of a sandboxed file (gzip is decompressed)."""
        return await read_log_text(_resolve_resource_path(path))

    @mcp.resource("log://{path}")
    async def log_contents(path: str) -> str:
        return await read_log_text(_resolve_resource_path(path))
