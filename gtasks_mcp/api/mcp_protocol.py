"""MCP Protocol Adapter — binds ToolDispatch to an MCP SDK low-level Server.

Invariants:
    - tools/list returns exactly dispatch.list_tools(), in registry order
    - Error kinds map to JSON-RPC codes here and nowhere else
    - Error data always carries {"kind": <ErrorKind>}
    - Strings become one text block; other payloads pretty-printed JSON (non-ASCII kept)

Design Decisions:
    - request_handlers table assigned explicitly instead of decorator registration:
      every protocol method -> handler mapping visible in one place
    - Same builder used by stdio and SSE: transports differ only in streams
"""

import json
import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from gtasks_mcp.config import APP_VERSION
from gtasks_mcp.core.domain_types import InvocationRequest
from gtasks_mcp.core.errors import ErrorKind, TasksMCPError
from gtasks_mcp.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)

STDIO_SERVER_NAME = "google-tasks-mcp"
HTTP_SERVER_NAME = "google-tasks-mcp-http"

_KIND_TO_JSONRPC = {
    ErrorKind.UNKNOWN_OPERATION: types.METHOD_NOT_FOUND,
    ErrorKind.OPERATION_FORBIDDEN: types.INVALID_REQUEST,
    ErrorKind.INVALID_ARGUMENTS: types.INVALID_PARAMS,
    ErrorKind.AUTH_REQUIRED: types.INTERNAL_ERROR,
    ErrorKind.AUTH_FAILED: types.INTERNAL_ERROR,
    ErrorKind.EXECUTION_ERROR: types.INTERNAL_ERROR,
}


def jsonrpc_code_for(kind: ErrorKind) -> int:
    return _KIND_TO_JSONRPC.get(kind, types.INTERNAL_ERROR)


def to_mcp_error(error: TasksMCPError) -> McpError:
    fields = error.to_error_data()
    return McpError(types.ErrorData(
        code=jsonrpc_code_for(error.kind),
        message=fields["message"],
        data=fields["data"],
    ))


def render_payload(payload: Any) -> list[types.TextContent]:
    if isinstance(payload, str):
        text = payload
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    return [types.TextContent(type="text", text=text)]


def build_mcp_server(
    dispatch: ToolDispatch, name: str = STDIO_SERVER_NAME,
) -> Server:
    """Low-level MCP server exposing tools/list and tools/call over dispatch."""
    server = Server(name, version=APP_VERSION)

    async def handle_list_tools(req: types.ListToolsRequest) -> types.ServerResult:
        tools = [types.Tool(**d.to_tool()) for d in dispatch.list_tools()]
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await dispatch.dispatch(InvocationRequest(
            operation_name=req.params.name,
            arguments=req.params.arguments or {},
        ))
        if not result.ok:
            raise to_mcp_error(result.error)
        return types.ServerResult(types.CallToolResult(
            content=render_payload(result.payload), isError=False,
        ))

    # Explicit table; adding a protocol method requires editing here
    server.request_handlers[types.ListToolsRequest] = handle_list_tools
    server.request_handlers[types.CallToolRequest] = handle_call_tool

    logger.debug(
        f"MCP server '{name}' built with {len(dispatch.list_tools())} tools",
    )
    return server
