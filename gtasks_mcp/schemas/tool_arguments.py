"""Tool Argument Schemas — one Pydantic model per tool, parsed before the handler runs.

Invariants:
    - Field aliases match the advertised inputSchema property names (camelCase)
    - IDs and titles are non-empty after stripping
    - Unknown keys ignored (clients may send extras), never forwarded to Google
    - Optional update fields default to None and mean "leave unchanged"

Design Decisions:
    - Explicit per-tool records over dict access in handlers: a typo fails at
      parse time, not as a silent no-op against the API
    - populate_by_name: tests and CLI code may build models with snake_case names
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gtasks_mcp.core.domain_types import TaskStatus


class ToolArguments(BaseModel):
    """Base for tool argument models."""
    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", frozen=True,
    )


class NoArguments(ToolArguments):
    """Tools without inputs."""


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty or whitespace")
    return v


# --- Task lists ---------------------------------------------------------------

class TaskListRef(ToolArguments):
    task_list_id: str = Field(alias="taskListId")

    @field_validator("task_list_id")
    @classmethod
    def strip_task_list_id(cls, v: str) -> str:
        return _strip_required(v)


class CreateTaskListArguments(ToolArguments):
    title: str = Field(max_length=1024)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)


class UpdateTaskListArguments(TaskListRef):
    title: str = Field(max_length=1024)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)


# --- Tasks --------------------------------------------------------------------

class ListTasksArguments(TaskListRef):
    show_completed: bool = Field(False, alias="showCompleted")
    show_hidden: bool = Field(False, alias="showHidden")
    max_results: int = Field(100, alias="maxResults", ge=1, le=100)


class TaskRef(TaskListRef):
    task_id: str = Field(alias="taskId")

    @field_validator("task_id")
    @classmethod
    def strip_task_id(cls, v: str) -> str:
        return _strip_required(v)


class CreateTaskArguments(TaskListRef):
    title: str = Field(max_length=1024)
    notes: str | None = Field(None, max_length=8192)
    due: str | None = None
    parent: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)


class UpdateTaskArguments(TaskRef):
    title: str | None = Field(None, max_length=1024)
    notes: str | None = Field(None, max_length=8192)
    status: TaskStatus | None = None
    due: str | None = None

    def updates(self) -> dict:
        """Only the fields the caller supplied (PATCH semantics)."""
        return self.model_dump(
            include={"title", "notes", "status", "due"},
            exclude_none=True, mode="json",
        )


class MoveTaskArguments(TaskRef):
    parent: str | None = None
    previous: str | None = None
