"""Task List Handlers — list, get, create, update, delete.

Invariants:
    - Arguments arrive already validated (schemas/tool_arguments.py)
    - Handlers return JSON-serializable payloads; API errors propagate to dispatch
"""

from gtasks_mcp.core.client_protocols import TasksClient
from gtasks_mcp.schemas.tool_arguments import (
    CreateTaskListArguments,
    NoArguments,
    TaskListRef,
    UpdateTaskListArguments,
)


async def list_task_lists(client: TasksClient, args: NoArguments) -> list[dict]:
    return await client.list_task_lists()


async def get_task_list(client: TasksClient, args: TaskListRef) -> dict:
    return await client.get_task_list(args.task_list_id)


async def create_task_list(
    client: TasksClient, args: CreateTaskListArguments,
) -> dict:
    return await client.create_task_list(args.title)


async def update_task_list(
    client: TasksClient, args: UpdateTaskListArguments,
) -> dict:
    return await client.update_task_list(args.task_list_id, args.title)


async def delete_task_list(client: TasksClient, args: TaskListRef) -> str:
    await client.delete_task_list(args.task_list_id)
    return "Task list deleted successfully"
