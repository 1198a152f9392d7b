"""Tool Dispatch — policy gate, argument validation, and explicit routing from tool name to handler.

Invariants:
    - Every tool->handler mapping is visible — no getattr magic, no auto-discovery
    - Order per call: lookup → policy gate → required fields → argument model →
      client → handler. Each step fails before the next one runs
    - Unknown tools, policy denials, and bad arguments never touch the client provider
    - get_auth_url never needs a client and is answered under any policy
    - dispatch() never raises for per-call failures: it returns InvocationResult
    - Every tool call logged with outcome, error code, and duration; failures
      logged at the error's severity

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Client provider injected (LazyClientCell in production, fakes in tests)
    - Already-classified TasksMCPError passes through unchanged; anything else
      becomes EXECUTION_ERROR so no raw exception reaches a transport
    - No retries here: the Google client owns retry and timeout policy
"""

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, NamedTuple

from pydantic import ValidationError

from gtasks_mcp.core.client_protocols import AuthUrlProvider, ClientProvider, TasksClient
from gtasks_mcp.core.domain_types import (
    AccessPolicy,
    InvocationRequest,
    InvocationResult,
    OperationDescriptor,
)
from gtasks_mcp.core.errors import (
    ErrorContext,
    ErrorSeverity,
    ExecutionError,
    InvalidArgumentsError,
    OperationForbiddenError,
    TasksMCPError,
    UnknownOperationError,
)
from gtasks_mcp.core.validate_arguments import check_required_fields
from gtasks_mcp.schemas.tool_arguments import (
    CreateTaskArguments,
    CreateTaskListArguments,
    ListTasksArguments,
    MoveTaskArguments,
    NoArguments,
    TaskListRef,
    TaskRef,
    ToolArguments,
    UpdateTaskArguments,
    UpdateTaskListArguments,
)
from gtasks_mcp.services import handle_task_lists, handle_tasks
from gtasks_mcp.services.define_auth_tools import GET_AUTH_URL
from gtasks_mcp.services.tools_registry import get_descriptor, list_available

logger = logging.getLogger(__name__)

AUTH_URL_MESSAGE = "Please visit this URL to authorize the application:\n\n{url}"

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ToolRoute(NamedTuple):
    """Handler plus the argument model it expects."""
    handler: Callable[[TasksClient, Any], Awaitable[Any]]
    arguments: type[ToolArguments]


class ToolDispatch:
    """Routes tool_name -> handler behind the read-only gate. Explicit registration."""

    def __init__(
        self,
        policy: AccessPolicy,
        client_provider: ClientProvider,
        auth_urls: AuthUrlProvider,
    ):
        self._policy = policy
        self._client_provider = client_provider
        self._auth_urls = auth_urls

        # Every mapping explicit; adding a tool requires editing this dict
        self._routes: dict[str, ToolRoute] = {
            # Task lists (5 tools)
            "list_task_lists": ToolRoute(handle_task_lists.list_task_lists, NoArguments),
            "get_task_list": ToolRoute(handle_task_lists.get_task_list, TaskListRef),
            "create_task_list": ToolRoute(
                handle_task_lists.create_task_list, CreateTaskListArguments,
            ),
            "update_task_list": ToolRoute(
                handle_task_lists.update_task_list, UpdateTaskListArguments,
            ),
            "delete_task_list": ToolRoute(handle_task_lists.delete_task_list, TaskListRef),

            # Tasks (7 tools)
            "list_tasks": ToolRoute(handle_tasks.list_tasks, ListTasksArguments),
            "get_task": ToolRoute(handle_tasks.get_task, TaskRef),
            "create_task": ToolRoute(handle_tasks.create_task, CreateTaskArguments),
            "update_task": ToolRoute(handle_tasks.update_task, UpdateTaskArguments),
            "move_task": ToolRoute(handle_tasks.move_task, MoveTaskArguments),
            "delete_task": ToolRoute(handle_tasks.delete_task, TaskRef),
            "clear_completed_tasks": ToolRoute(
                handle_tasks.clear_completed_tasks, TaskListRef,
            ),
        }

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def list_tools(self) -> list[OperationDescriptor]:
        """Catalog visible under the current policy (served verbatim by transports)."""
        return list_available(self._policy)

    async def dispatch(self, request: InvocationRequest) -> InvocationResult:
        """Run one tool call. Returns a result; never raises for per-call errors."""
        started = time.perf_counter()
        try:
            payload = await self._execute(request)
        except TasksMCPError as exc:
            result = InvocationResult.failure(exc)
        except Exception as exc:
            logger.error(
                f"Tool '{request.operation_name}' raised: {exc}",
                exc_info=True,
                extra={"operation": request.operation_name},
            )
            result = InvocationResult.failure(ExecutionError(
                f"Error executing tool: {exc}",
                context=ErrorContext(operation=request.operation_name),
            ))
        else:
            result = InvocationResult.success(payload)
        self._log_tool_call(request.operation_name, result, started)
        return result

    async def _execute(self, request: InvocationRequest) -> Any:
        name = request.operation_name
        descriptor = get_descriptor(name)
        if descriptor is None:
            raise UnknownOperationError(name)
        if self._policy.read_only_mode and descriptor.mutating:
            raise OperationForbiddenError(name)

        arguments = request.arguments or {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(
                f"Arguments for '{name}' must be an object",
                context=ErrorContext(operation=name),
            )
        check_required_fields(descriptor, arguments)

        if name == GET_AUTH_URL:
            return AUTH_URL_MESSAGE.format(url=self._auth_urls.get_auth_url())

        route = self._routes.get(name)
        if route is None:
            raise UnknownOperationError(name)
        args = _parse_arguments(name, route.arguments, arguments)

        client = await self._client_provider.get_client()
        return await route.handler(client, args)

    def _log_tool_call(
        self, tool_name: str, result: InvocationResult, started: float,
    ) -> None:
        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        if result.ok:
            logger.info(
                f"Tool '{tool_name}' succeeded",
                extra={"operation": tool_name, "duration_ms": duration_ms},
            )
            return
        error = result.error
        logger.log(
            _LOG_LEVELS[error.severity],
            f"Tool '{tool_name}' failed: {error.message}",
            extra={
                "operation": tool_name,
                "error_code": error.code.value,
                "error_category": error.category.value,
                "duration_ms": duration_ms,
            },
        )


def _parse_arguments(
    name: str, model: type[ToolArguments], arguments: Mapping[str, Any],
) -> ToolArguments:
    """Parse raw arguments into the tool's model or raise INVALID_ARGUMENTS."""
    try:
        return model.model_validate(dict(arguments))
    except ValidationError as exc:
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        fields = ", ".join(d["field"] for d in details)
        raise InvalidArgumentsError(
            f"Invalid argument(s) for '{name}': {fields}",
            details=details,
            context=ErrorContext(operation=name),
        ) from exc
