"""Define Task List Tools — MCP descriptors for Google Tasks task-list operations.

Invariants:
    - Required fields enforced by schema AND by dispatch (check_required_fields)
    - list/get are read-only; create/update/delete are mutating
"""

from gtasks_mcp.core.domain_types import OperationDescriptor

_TASK_LIST_ID = {
    "type": "string",
    "description": "ID of the task list",
}

TOOLS_TASK_LISTS: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name="list_task_lists",
        description="List all Google Tasks task lists",
        input_schema={
            "type": "object",
            "properties": {},
        },
        mutating=False,
    ),
    OperationDescriptor(
        name="get_task_list",
        description="Get a single task list by ID",
        input_schema={
            "type": "object",
            "properties": {"taskListId": _TASK_LIST_ID},
            "required": ["taskListId"],
        },
        mutating=False,
    ),
    OperationDescriptor(
        name="create_task_list",
        description="Create a new task list",
        input_schema={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Title of the new task list",
                },
            },
            "required": ["title"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="update_task_list",
        description="Rename an existing task list",
        input_schema={
            "type": "object",
            "properties": {
                "taskListId": _TASK_LIST_ID,
                "title": {
                    "type": "string",
                    "description": "New title for the task list",
                },
            },
            "required": ["taskListId", "title"],
        },
        mutating=True,
    ),
    OperationDescriptor(
        name="delete_task_list",
        description="Delete a task list and all of its tasks",
        input_schema={
            "type": "object",
            "properties": {"taskListId": _TASK_LIST_ID},
            "required": ["taskListId"],
        },
        mutating=True,
    ),
)
