"""Domain Types — descriptors, policy, and invocation envelopes shared by every transport.

Invariants:
    - OperationDescriptor is frozen: name, schema, and mutating flag fixed at definition time
    - AccessPolicy is frozen: read_only_mode never changes after process start
    - InvocationResult is exactly one of success (payload) or failure (error)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - Frozen dataclasses over pydantic models: built once at import, never validated again
    - str Enums: serialize to JSON without custom encoders (MCP results are JSON)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gtasks_mcp.core.errors import TasksMCPError


# ─── Enums ───────────────────────────────────────────────────────

class TaskStatus(str, Enum):
    """Google Tasks task status values."""
    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"


# ─── Catalog ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class OperationDescriptor:
    """Static metadata for one invocable tool."""
    name: str
    description: str
    input_schema: Mapping[str, Any]
    mutating: bool

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))

    def to_tool(self) -> dict:
        """MCP tools/list wire form."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": dict(self.input_schema),
        }


@dataclass(frozen=True)
class AccessPolicy:
    """Read-only gate, loaded once from configuration."""
    read_only_mode: bool = True

    @property
    def allows_mutation(self) -> bool:
        return not self.read_only_mode


# ─── Invocation envelopes ────────────────────────────────────────

@dataclass(frozen=True)
class InvocationRequest:
    """One inbound tool call."""
    operation_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one tool call — success payload or classified failure."""
    payload: Any = None
    error: TasksMCPError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: Any) -> "InvocationResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: TasksMCPError) -> "InvocationResult":
        return cls(error=error)
