"""Google Tasks MCP over stdio — entry point for desktop MCP clients.

Invariants:
    - stdout carries only MCP protocol frames; logs go to stderr
    - Client credentials required at startup; the OAuth token is not (get_auth_url works without it)
"""

import asyncio
import logging
import sys

from mcp.server.stdio import stdio_server

from gtasks_mcp.api.mcp_protocol import STDIO_SERVER_NAME, build_mcp_server
from gtasks_mcp.bootstrap import build_tool_dispatch
from gtasks_mcp.config import Settings, get_settings
from gtasks_mcp.core.errors import ConfigurationError
from gtasks_mcp.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


async def serve_stdio(settings: Settings) -> None:
    server = build_mcp_server(build_tool_dispatch(settings), STDIO_SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        logger.info(
            "Google Tasks MCP server running on stdio",
            extra={"transport": "stdio"},
        )
        await server.run(
            read_stream, write_stream, server.create_initialization_options(),
        )


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if not settings.google_client_id or not settings.google_client_secret:
        error = ConfigurationError([
            "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables are required",
        ])
        logger.critical(error.message, extra={"error_code": error.code.value})
        sys.exit(1)
    try:
        asyncio.run(serve_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Google Tasks MCP server stopped")


if __name__ == "__main__":
    main()
