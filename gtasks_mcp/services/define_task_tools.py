"""Define Task Tools — MCP descriptors for Google Tasks task operations.

Invariants:
    - list_tasks and get_task are read-only; every other task tool is mutating
    - Due dates travel as RFC 3339 strings (Google stores the date part only)
"""

from gtasks_mcp.core.domain_types import OperationDescriptor, TaskStatus

_TASK_LIST_ID = {
    "type": "string",
    "description": "ID of the task list",
}

TOOLS_TASKS: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name="list_tasks",
        description="List tasks in a specific task list",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "showCompleted": {
                    "type": "boolean",
                    "description": "Include completed tasks",
                    "default": False,
                },
                "showHidden": {
                    "type": "boolean",
                    "description": "Include hidden (cleared) tasks",
                    "default": False,
                },
                "maxResults": {
                    "type": "integer",
                    "description": "Maximum number of tasks to return (1-100)",
                    "default": 100,
                },
            },
            "required": ["taskListId"],
        },
        mutating=False,
    ),
    OperationDescriptor(
        name="get_task",
        description="Get a single task by ID",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "taskId": {"type": "string", "description": "ID of the task"},
            },
            "required": ["taskListId", "taskId"],
        },
        mutating=False,
    ),
    OperationDescriptor(
        name="create_task",
        description="Create a new task in a task list",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "title": {
                    "type": "string",
                    "description": "Title of the task",
                },
                "notes": {
                    "type": "string",
                    "description": "Notes/description for the task",
                },
                "due": {
                    "type": "string",
                    "description": "Due date in RFC 3339 format (e.g., 2024-12-31T23:59:59Z)",
                },
                "parent": {
                    "type": "string",
                    "description": "Parent task ID (creates a subtask)",
                },
            },
            "required": ["taskListId", "title"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="update_task",
        description="Update an existing task",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "taskId": {
                    "type": "string",
                    "description": "ID of the task to update",
                },
                "title": {
                    "type": "string",
                    "description": "New title for the task",
                },
                "notes": {
                    "type": "string",
                    "description": "New notes for the task",
                },
                "status": {
                    "type": "string",
                    "enum": [s.value for s in TaskStatus],
                    "description": "Task status",
                },
                "due": {
                    "type": "string",
                    "description": "Due date in RFC 3339 format",
                },
            },
            "required": ["taskListId", "taskId"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="move_task",
        description="Move a task under another parent or after a sibling",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "taskId": {
                    "type": "string",
                    "description": "ID of the task to move",
                },
                "parent": {
                    "type": "string",
                    "description": "New parent task ID (omit to move to top level)",
                },
                "previous": {
                    "type": "string",
                    "description": "Sibling task ID to place the task after (omit for first position)",
                },
            },
            "required": ["taskListId", "taskId"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="delete_task",
        description="Delete a task",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "taskId": {
                    "type": "string",
                    "description": "ID of the task to delete",
                },
            },
            "required": ["taskListId", "taskId"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="clear_completed_tasks",
        description="Hide all completed tasks in a task list",
        input_schema={
            "type": "object",
            "properties": {"taskListId": _TASK_LIST_ID},
            "required": ["taskListId"],
        },
        mutating=True,
    ),
)
