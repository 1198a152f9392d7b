"""MCP over SSE — GET /mcp/sse opens a session, POST /mcp/messages/ feeds it.

Invariants:
    - One MCP session per SSE connection; all sessions share one dispatcher
    - Both paths sit under /mcp, so bearer auth, rate limit, and body limit apply
    - Closing the stream ends the session; in-flight tool calls are not cancelled

Design Decisions:
    - SSE endpoint is a raw ASGI callable: the SDK transport writes the response
      itself, so no Starlette Response is sent afterwards
    - Message path registered with app.mount: SseServerTransport.handle_post_message
      is an ASGI app keyed by ?session_id=
"""

import logging

from fastapi import FastAPI
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from starlette.types import Receive, Scope, Send

from gtasks_mcp.api.security import client_ip

logger = logging.getLogger(__name__)

SSE_PATH = "/mcp/sse"
MESSAGES_PATH = "/mcp/messages/"


class McpSseEndpoint:
    """Runs the MCP server for the lifetime of one SSE connection."""

    def __init__(self, server: Server, transport: SseServerTransport):
        self.server = server
        self.transport = transport

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        log_extra = {"transport": "sse", "client_ip": client_ip(scope)}
        logger.info("SSE connection established", extra=log_extra)
        async with self.transport.connect_sse(scope, receive, send) as streams:
            read_stream, write_stream = streams
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
        logger.info("SSE connection closed", extra=log_extra)


def register_mcp_routes(app: FastAPI, server: Server) -> SseServerTransport:
    """Attach the SSE stream and message endpoints to the app."""
    transport = SseServerTransport(MESSAGES_PATH)
    app.add_route(SSE_PATH, McpSseEndpoint(server, transport), methods=["GET"])
    app.mount(MESSAGES_PATH, app=transport.handle_post_message)
    return transport
