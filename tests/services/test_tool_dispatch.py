"""Tool Dispatch — policy gate, validation, routing, and error normalization.

Tests cover:
    - Mutating tools under read-only → OPERATION_FORBIDDEN, provider never called
    - Unknown tools → UNKNOWN_OPERATION, provider never called
    - Missing/invalid arguments → INVALID_ARGUMENTS before the client is requested
    - get_auth_url answered without a client under either policy
    - Handler exceptions normalized to EXECUTION_ERROR; classified errors pass through
    - Every routed tool reaches the matching client method
"""

import pytest

from gtasks_mcp.core.domain_types import AccessPolicy, InvocationRequest
from gtasks_mcp.core.errors import AuthRequiredError, ErrorKind, TasksAPIError
from gtasks_mcp.services.tool_dispatch import AUTH_URL_MESSAGE, ToolDispatch
from gtasks_mcp.services.tools_registry import MUTATING_TOOLS

from tests.services.fake_tasks import AUTH_URL, CountingProvider, StaticAuthUrls


def _call(name, **arguments):
    return InvocationRequest(operation_name=name, arguments=arguments)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", sorted(MUTATING_TOOLS))
async def test_read_only_denies_mutating_tools(read_only, provider, name):
    result = await read_only.dispatch(_call(name, taskListId="l", taskId="t", title="x"))
    assert not result.ok
    assert result.error.kind == ErrorKind.OPERATION_FORBIDDEN
    assert name in result.error.message
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_read_only_denial_precedes_argument_checks(read_only, provider):
    result = await read_only.dispatch(_call("delete_task"))
    assert result.error.kind == ErrorKind.OPERATION_FORBIDDEN
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_read_only_allows_reads(read_only, provider):
    result = await read_only.dispatch(_call("list_task_lists"))
    assert result.ok
    assert result.payload[0]["id"] == "list-1"
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_unknown_tool(full_access, provider):
    result = await full_access.dispatch(_call("drop_everything"))
    assert result.error.kind == ErrorKind.UNKNOWN_OPERATION
    assert result.error.message == "Unknown tool: drop_everything"
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_missing_required_argument(full_access, provider):
    result = await full_access.dispatch(_call("get_task", taskListId="l"))
    assert result.error.kind == ErrorKind.INVALID_ARGUMENTS
    assert result.error.missing == ["taskId"]
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_invalid_argument_value(full_access, provider):
    result = await full_access.dispatch(
        _call("list_tasks", taskListId="l", maxResults=500),
    )
    assert result.error.kind == ErrorKind.INVALID_ARGUMENTS
    assert "maxResults" in result.error.message
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_non_object_arguments(full_access, provider):
    result = await full_access.dispatch(
        InvocationRequest(operation_name="get_task_list", arguments=["l"]),
    )
    assert result.error.kind == ErrorKind.INVALID_ARGUMENTS
    assert provider.calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("fixture_name", ["read_only", "full_access"])
async def test_auth_url_needs_no_client(request, provider, auth_urls, fixture_name):
    dispatch = request.getfixturevalue(fixture_name)
    result = await dispatch.dispatch(_call("get_auth_url"))
    assert result.ok
    assert result.payload == AUTH_URL_MESSAGE.format(url=AUTH_URL)
    assert provider.calls == 0
    assert auth_urls.calls == 1


@pytest.mark.asyncio
async def test_auth_required_passes_through():
    dispatch = ToolDispatch(
        AccessPolicy(read_only_mode=True),
        CountingProvider(error=AuthRequiredError()),
        StaticAuthUrls(),
    )
    result = await dispatch.dispatch(_call("list_task_lists"))
    assert result.error.kind == ErrorKind.AUTH_REQUIRED


@pytest.mark.asyncio
async def test_api_error_passes_through(full_access, provider):
    async def failing(task_list_id):
        raise TasksAPIError("Not Found", 404)

    provider.client.get_task_list = failing
    result = await full_access.dispatch(_call("get_task_list", taskListId="missing"))
    assert result.error.kind == ErrorKind.EXECUTION_ERROR
    assert result.error.status_code == 404


@pytest.mark.asyncio
async def test_unexpected_exception_normalized(full_access, provider):
    async def broken(task_list_id):
        raise RuntimeError("socket closed")

    provider.client.get_task_list = broken
    result = await full_access.dispatch(_call("get_task_list", taskListId="l"))
    assert result.error.kind == ErrorKind.EXECUTION_ERROR
    assert result.error.message == "Error executing tool: socket closed"


@pytest.mark.asyncio
async def test_update_task_sends_only_supplied_fields(full_access, provider):
    result = await full_access.dispatch(
        _call("update_task", taskListId="l", taskId="t", status="completed"),
    )
    assert result.ok
    assert provider.client.calls == [("update_task", "l", "t", {"status": "completed"})]


@pytest.mark.asyncio
async def test_list_tasks_defaults(full_access, provider):
    await full_access.dispatch(_call("list_tasks", taskListId="l"))
    assert provider.client.calls == [("list_tasks", "l", False, False, 100)]


@pytest.mark.asyncio
@pytest.mark.parametrize("name, arguments, expected", [
    ("delete_task_list", {"taskListId": "l"}, "Task list deleted successfully"),
    ("delete_task", {"taskListId": "l", "taskId": "t"}, "Task deleted successfully"),
    ("clear_completed_tasks", {"taskListId": "l"}, "Completed tasks cleared successfully"),
])
async def test_deletions_return_confirmation(full_access, name, arguments, expected):
    result = await full_access.dispatch(_call(name, **arguments))
    assert result.payload == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("name, arguments, client_call", [
    ("get_task_list", {"taskListId": "l"}, ("get_task_list", "l")),
    ("create_task_list", {"title": "Home"}, ("create_task_list", "Home")),
    ("update_task_list", {"taskListId": "l", "title": "Home"}, ("update_task_list", "l", "Home")),
    ("get_task", {"taskListId": "l", "taskId": "t"}, ("get_task", "l", "t")),
    (
        "create_task",
        {"taskListId": "l", "title": "Buy milk", "notes": "2%"},
        ("create_task", "l", "Buy milk", "2%", None, None),
    ),
    (
        "move_task",
        {"taskListId": "l", "taskId": "t", "previous": "s"},
        ("move_task", "l", "t", None, "s"),
    ),
])
async def test_routes_reach_client(full_access, provider, name, arguments, client_call):
    result = await full_access.dispatch(_call(name, **arguments))
    assert result.ok
    assert provider.client.calls == [client_call]


def test_list_tools_follows_policy(read_only, full_access):
    assert len(full_access.list_tools()) == 13
    assert [t.name for t in read_only.list_tools()] == [
        "list_task_lists", "get_task_list", "list_tasks", "get_task", "get_auth_url",
    ]


@pytest.mark.asyncio
async def test_failures_logged_at_error_severity(read_only, full_access, caplog):
    caplog.set_level("INFO", logger="gtasks_mcp.services.tool_dispatch")
    await read_only.dispatch(_call("delete_task", taskListId="l", taskId="t"))
    await full_access.dispatch(_call("drop_everything"))
    forbidden, unknown = caplog.records
    assert forbidden.levelname == "WARNING"
    assert forbidden.error_category == "policy"
    assert unknown.levelname == "ERROR"
    assert unknown.error_code == "UNKNOWN_OPERATION"
    assert unknown.operation == "drop_everything"
