"""gtasks-mcp-view-tasks — print task lists and tasks with RTL text readable in a terminal.

Without a task list id the first list is shown. --json prints the raw
structure with title/notes fields passed through the structural formatter.
"""

import argparse
import asyncio
import json
import sys

from gtasks_mcp.bootstrap import open_tasks_client
from gtasks_mcp.config import get_settings
from gtasks_mcp.core.client_protocols import TasksClient
from gtasks_mcp.core.domain_types import TaskStatus
from gtasks_mcp.core.errors import TasksMCPError
from gtasks_mcp.core.format_terminal import (
    format_for_display,
    format_structure_for_display,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gtasks-mcp-view-tasks",
        description="Show Google Tasks in the terminal.",
    )
    parser.add_argument(
        "task_list_id", nargs="?", help="task list to show (default: first list)",
    )
    parser.add_argument(
        "--completed", action="store_true",
        help="include completed and hidden tasks",
    )
    parser.add_argument(
        "--json", action="store_true", dest="as_json",
        help="print JSON instead of the text listing",
    )
    return parser


async def collect(
    client: TasksClient, task_list_id: str | None, show_completed: bool,
) -> dict:
    """Fetch the lists (when no id given) and the tasks of the selected list."""
    task_lists: list[dict] = []
    if not task_list_id:
        task_lists = await client.list_task_lists()
        if not task_lists:
            return {"taskLists": [], "taskListId": None, "tasks": []}
        task_list_id = task_lists[0]["id"]
    tasks = await client.list_tasks(
        task_list_id, show_completed=show_completed, show_hidden=show_completed,
    )
    return {"taskLists": task_lists, "taskListId": task_list_id, "tasks": tasks}


def render_text(view: dict) -> None:
    task_lists = view["taskLists"]
    if task_lists:
        print("Available task lists:")
        for index, task_list in enumerate(task_lists, start=1):
            title = format_for_display(task_list.get("title", ""))
            print(f"{index}. {title} ({task_list.get('id')})")
        print(f"\nShowing tasks from: {format_for_display(task_lists[0].get('title', ''))}\n")
    elif view["taskListId"] is None:
        print("No task lists found.")
        return

    tasks = view["tasks"]
    if not tasks:
        print("No tasks found in this list.")
        return

    print(f"Found {len(tasks)} task(s):\n")
    for index, task in enumerate(tasks, start=1):
        mark = "[x]" if task.get("status") == TaskStatus.COMPLETED.value else "[ ]"
        print(f"{mark} {index}. {format_for_display(task.get('title', ''))}")
        if task.get("notes"):
            print(f"   Notes: {format_for_display(task['notes'])}")
        if task.get("due"):
            print(f"   Due: {task['due']}")
        print(f"   ID: {task.get('id')}")
        print(f"   Status: {task.get('status')}")
        print(f"   Updated: {task.get('updated')}\n")


async def show(
    client: TasksClient,
    task_list_id: str | None = None,
    show_completed: bool = False,
    as_json: bool = False,
) -> int:
    view = await collect(client, task_list_id, show_completed)
    if as_json:
        print(json.dumps(
            format_structure_for_display(view), indent=2, ensure_ascii=False,
        ))
    else:
        render_text(view)
    return 0


async def _run(args: argparse.Namespace) -> int:
    client = await open_tasks_client(get_settings())
    return await show(client, args.task_list_id, args.completed, args.as_json)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except TasksMCPError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
