"""Composition Root — builds the auth manager, lazy client cell, and dispatcher from settings.

Invariants:
    - Only place that turns Settings into collaborator objects
    - Building performs no network IO: the Tasks client is created on first tool call
"""

from functools import partial

from gtasks_mcp.config import Settings
from gtasks_mcp.infrastructure.client_cell import LazyClientCell
from gtasks_mcp.infrastructure.google_auth import GoogleAuthManager
from gtasks_mcp.infrastructure.tasks_client import GoogleTasksClient, create_tasks_client
from gtasks_mcp.services.tool_dispatch import ToolDispatch


def build_auth_manager(settings: Settings) -> GoogleAuthManager:
    return GoogleAuthManager(
        settings.google_client_id,
        settings.google_client_secret,
        redirect_uri=settings.google_redirect_uri,
        token_path=settings.token_path,
    )


def build_tool_dispatch(
    settings: Settings, auth: GoogleAuthManager | None = None,
) -> ToolDispatch:
    auth = auth or build_auth_manager(settings)
    cell = LazyClientCell(partial(
        create_tasks_client,
        auth,
        timeout_seconds=settings.google_http_timeout_seconds,
        num_retries=settings.google_num_retries,
    ))
    return ToolDispatch(settings.access_policy(), cell, auth)


async def open_tasks_client(
    settings: Settings, auth: GoogleAuthManager | None = None,
) -> GoogleTasksClient:
    """Eager client for the CLIs. Raises AuthRequiredError / AuthFailedError."""
    return await create_tasks_client(
        auth or build_auth_manager(settings),
        timeout_seconds=settings.google_http_timeout_seconds,
        num_retries=settings.google_num_retries,
    )
