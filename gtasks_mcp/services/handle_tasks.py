"""Task Handlers — list, get, create, update, move, delete, clear completed.

Invariants:
    - update_task sends only the fields the caller supplied (PATCH, never PUT)
    - Deletions return a confirmation string (the API returns an empty body)
"""

from gtasks_mcp.core.client_protocols import TasksClient
from gtasks_mcp.schemas.tool_arguments import (
    CreateTaskArguments,
    ListTasksArguments,
    MoveTaskArguments,
    TaskListRef,
    TaskRef,
    UpdateTaskArguments,
)


async def list_tasks(client: TasksClient, args: ListTasksArguments) -> list[dict]:
    return await client.list_tasks(
        args.task_list_id,
        show_completed=args.show_completed,
        show_hidden=args.show_hidden,
        max_results=args.max_results,
    )


async def get_task(client: TasksClient, args: TaskRef) -> dict:
    return await client.get_task(args.task_list_id, args.task_id)


async def create_task(client: TasksClient, args: CreateTaskArguments) -> dict:
    return await client.create_task(
        args.task_list_id,
        args.title,
        notes=args.notes,
        due=args.due,
        parent=args.parent,
    )


async def update_task(client: TasksClient, args: UpdateTaskArguments) -> dict:
    return await client.update_task(
        args.task_list_id, args.task_id, args.updates(),
    )


async def move_task(client: TasksClient, args: MoveTaskArguments) -> dict:
    return await client.move_task(
        args.task_list_id,
        args.task_id,
        parent=args.parent,
        previous=args.previous,
    )


async def delete_task(client: TasksClient, args: TaskRef) -> str:
    await client.delete_task(args.task_list_id, args.task_id)
    return "Task deleted successfully"


async def clear_completed_tasks(client: TasksClient, args: TaskListRef) -> str:
    await client.clear_completed_tasks(args.task_list_id)
    return "Completed tasks cleared successfully"
