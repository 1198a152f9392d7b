"""Google Tasks Client — async wrapper over the googleapiclient discovery service.

Invariants:
    - Every call runs in a worker thread with its own httplib2.Http (finite timeout)
    - HttpError → TasksAPIError carrying the HTTP status; network errors → status None
    - Refresh failures mid-call → AuthFailedError
    - A refreshed access token is handed to on_token_refresh once, for persistence
    - At most one thread refreshes the shared Credentials at a time
    - update_task is a PATCH: only supplied fields are sent

Design Decisions:
    - Wrapper over raw service: isolates SDK error mapping from handlers
    - num_retries delegated to googleapiclient (exponential backoff on 5xx/429)
    - httplib2.Http is not thread-safe, hence one per request instead of the
      service-level default
"""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import Any

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from google_auth_httplib2 import Request as AuthorizedRequest
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gtasks_mcp.core.errors import AuthFailedError, ErrorContext, TasksAPIError
from gtasks_mcp.infrastructure.google_auth import GoogleAuthManager

logger = logging.getLogger(__name__)


class GoogleTasksClient:
    """Async facade for Google Tasks API v1."""

    def __init__(
        self,
        credentials: Credentials,
        timeout_seconds: float = 30,
        num_retries: int = 2,
        service: Any = None,
        on_token_refresh: Callable[[Credentials], None] | None = None,
    ):
        self._credentials = credentials
        self._on_token_refresh = on_token_refresh
        self._persisted_token = credentials.token
        self._token_lock = threading.Lock()
        self.timeout_seconds = timeout_seconds
        self.num_retries = num_retries
        self._service = service or build(
            "tasks", "v1", credentials=credentials, cache_discovery=False,
        )

    # ─── Task lists ─────────────────────────────────────────────

    async def list_task_lists(self) -> list[dict]:
        response = await self._execute(
            self._service.tasklists().list(maxResults=100), "list_task_lists",
        )
        return response.get("items", []) if response else []

    async def get_task_list(self, task_list_id: str) -> dict:
        return await self._execute(
            self._service.tasklists().get(tasklist=task_list_id),
            "get_task_list",
        )

    async def create_task_list(self, title: str) -> dict:
        return await self._execute(
            self._service.tasklists().insert(body={"title": title}),
            "create_task_list",
        )

    async def update_task_list(self, task_list_id: str, title: str) -> dict:
        return await self._execute(
            self._service.tasklists().patch(
                tasklist=task_list_id, body={"title": title},
            ),
            "update_task_list",
        )

    async def delete_task_list(self, task_list_id: str) -> None:
        await self._execute(
            self._service.tasklists().delete(tasklist=task_list_id),
            "delete_task_list",
        )

    # ─── Tasks ──────────────────────────────────────────────────

    async def list_tasks(
        self,
        task_list_id: str,
        show_completed: bool = False,
        show_hidden: bool = False,
        max_results: int = 100,
    ) -> list[dict]:
        response = await self._execute(
            self._service.tasks().list(
                tasklist=task_list_id,
                showCompleted=show_completed,
                showHidden=show_hidden,
                maxResults=max_results,
            ),
            "list_tasks",
        )
        return response.get("items", []) if response else []

    async def get_task(self, task_list_id: str, task_id: str) -> dict:
        return await self._execute(
            self._service.tasks().get(tasklist=task_list_id, task=task_id),
            "get_task",
        )

    async def create_task(
        self,
        task_list_id: str,
        title: str,
        notes: str | None = None,
        due: str | None = None,
        parent: str | None = None,
    ) -> dict:
        body = {"title": title}
        if notes is not None:
            body["notes"] = notes
        if due is not None:
            body["due"] = due
        params: dict[str, Any] = {"tasklist": task_list_id, "body": body}
        if parent:
            params["parent"] = parent
        return await self._execute(
            self._service.tasks().insert(**params), "create_task",
        )

    async def update_task(
        self, task_list_id: str, task_id: str, updates: dict[str, Any],
    ) -> dict:
        return await self._execute(
            self._service.tasks().patch(
                tasklist=task_list_id, task=task_id, body=dict(updates),
            ),
            "update_task",
        )

    async def delete_task(self, task_list_id: str, task_id: str) -> None:
        await self._execute(
            self._service.tasks().delete(tasklist=task_list_id, task=task_id),
            "delete_task",
        )

    async def move_task(
        self,
        task_list_id: str,
        task_id: str,
        parent: str | None = None,
        previous: str | None = None,
    ) -> dict:
        params: dict[str, Any] = {"tasklist": task_list_id, "task": task_id}
        if parent:
            params["parent"] = parent
        if previous:
            params["previous"] = previous
        return await self._execute(
            self._service.tasks().move(**params), "move_task",
        )

    async def clear_completed_tasks(self, task_list_id: str) -> None:
        await self._execute(
            self._service.tasks().clear(tasklist=task_list_id),
            "clear_completed_tasks",
        )

    # ─── Execution ──────────────────────────────────────────────

    def _new_http(self) -> AuthorizedHttp:
        return AuthorizedHttp(
            self._credentials, http=httplib2.Http(timeout=self.timeout_seconds),
        )

    def _ensure_fresh_token(self) -> None:
        """Refresh an expired token once, however many requests are in flight."""
        with self._token_lock:
            if not self._credentials.valid:
                self._credentials.refresh(
                    AuthorizedRequest(httplib2.Http(timeout=self.timeout_seconds)),
                )
            self._persist_if_refreshed()

    def _persist_if_refreshed(self) -> None:
        token = self._credentials.token
        if token == self._persisted_token or self._on_token_refresh is None:
            return
        try:
            self._on_token_refresh(self._credentials)
        except OSError as e:
            logger.error(f"Failed to save refreshed token: {e}", exc_info=True)
            return
        self._persisted_token = token

    def _run(self, request: Any) -> Any:
        self._ensure_fresh_token()
        response = request.execute(
            http=self._new_http(), num_retries=self.num_retries,
        )
        # AuthorizedHttp refreshes on 401 without telling anyone
        with self._token_lock:
            self._persist_if_refreshed()
        return response

    async def _execute(self, request: Any, operation: str) -> Any:
        """Run one API request off the event loop with error mapping."""
        context = ErrorContext(operation=operation)
        try:
            return await asyncio.to_thread(self._run, request)
        except HttpError as e:
            logger.warning(
                f"Google Tasks API returned {e.resp.status} for {operation}",
                extra={"operation": operation},
            )
            raise TasksAPIError(
                e.reason or str(e), e.resp.status, context=context,
            ) from e
        except RefreshError as e:
            raise AuthFailedError(str(e), context=context) from e
        except TransportError as e:
            raise AuthFailedError(
                f"token endpoint unreachable: {e}", context=context,
            ) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            logger.error(
                f"Google Tasks API unreachable for {operation}: {e}",
                extra={"operation": operation},
            )
            raise TasksAPIError(str(e), context=context) from e


async def create_tasks_client(
    auth: GoogleAuthManager,
    timeout_seconds: float = 30,
    num_retries: int = 2,
) -> GoogleTasksClient:
    """Client factory for LazyClientCell. Raises AuthRequiredError / AuthFailedError."""
    credentials = await asyncio.to_thread(auth.get_credentials)
    return GoogleTasksClient(
        credentials,
        timeout_seconds=timeout_seconds,
        num_retries=num_retries,
        on_token_refresh=auth.save_credentials,
    )
