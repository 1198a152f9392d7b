"""Error Hierarchy — typed, categorized exceptions for every tool-call failure mode.

Invariants:
    - Every error has a code (ErrorKind), category (ErrorCategory), severity (ErrorSeverity)
    - ErrorKind tags are stable: transports map them to protocol codes, never the reverse
    - to_error_data() produces the MCP error fields; severity picks the log level
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TasksMCPError base: the dispatcher catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable failure tags reported to callers."""
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    OPERATION_FORBIDDEN = "OPERATION_FORBIDDEN"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_FAILED = "AUTH_FAILED"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    POLICY = "policy"
    AUTHENTICATION = "authentication"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class TasksMCPError(Exception):
    """Base exception for all Google Tasks MCP errors."""

    def __init__(
        self,
        message: str,
        code: ErrorKind,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def kind(self) -> ErrorKind:
        return self.code

    def to_error_data(self) -> dict:
        """Fields for an MCP error payload (code mapping is the transport's job)."""
        data: dict[str, Any] = {"kind": self.code.value}
        if self.context.operation:
            data["operation"] = self.context.operation
        if self.context.debug_info:
            data.update(self.context.debug_info)
        return {"message": self.message, "data": data}


# ─── Dispatch Errors ────────────────────────────────────────────

class UnknownOperationError(TasksMCPError):
    """Tool name not present in the registry."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(operation=name)
        super().__init__(
            f"Unknown tool: {name}",
            ErrorKind.UNKNOWN_OPERATION, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )


class InvalidArgumentsError(TasksMCPError):
    """Tool arguments missing required fields or failing validation."""
    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        debug: dict[str, Any] = {}
        if missing:
            debug["missing"] = missing
        if details:
            debug["details"] = details
        if debug:
            ctx.debug_info = debug
        super().__init__(
            message, ErrorKind.INVALID_ARGUMENTS, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )
        self.missing = missing or []
        self.details = details or []


class OperationForbiddenError(TasksMCPError):
    """Mutating tool called while the server runs in read-only mode."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(operation=name)
        super().__init__(
            f"Tool '{name}' is not available in read-only mode. "
            "Set READ_ONLY=false to enable write operations.",
            ErrorKind.OPERATION_FORBIDDEN, ErrorCategory.POLICY,
            ErrorSeverity.WARNING, ctx,
        )


# ─── Credential Errors ──────────────────────────────────────────

class AuthRequiredError(TasksMCPError):
    """No usable OAuth token exists yet."""
    def __init__(
        self,
        message: str = (
            "No valid token found. Please authenticate first using "
            "get_auth_url and the setup-auth command."
        ),
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ErrorKind.AUTH_REQUIRED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context,
        )


class AuthFailedError(TasksMCPError):
    """Token exists but exchange or refresh was rejected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Authentication failed: {message}",
            ErrorKind.AUTH_FAILED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context,
        )


# ─── Execution Errors ───────────────────────────────────────────

class ExecutionError(TasksMCPError):
    """Underlying tool action failed."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ErrorKind.EXECUTION_ERROR, ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, context,
        )


class TasksAPIError(ExecutionError):
    """Google Tasks API call failed."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Google Tasks API error ({status_code or 'network'}): {message}",
            context,
        )
        self.category = ErrorCategory.EXTERNAL_API
        self.status_code = status_code


class ConfigurationError(TasksMCPError):
    """Settings invalid for the requested run mode."""
    def __init__(self, problems: list[str], context: ErrorContext | None = None):
        super().__init__(
            "Invalid configuration: " + "; ".join(problems),
            ErrorKind.CONFIGURATION_ERROR, ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
        self.problems = problems
