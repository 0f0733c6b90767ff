"""`python -m mcp_log_timeline_server` starts the MCP server over stdio."""

from __future__ import annotations

from mcp_log_timeline_server.server.log_server import main

if __name__ == "__main__":
    main()
