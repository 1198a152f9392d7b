"""Argument Validation — required-field presence check against a tool descriptor.

Invariants:
    - A required field that is absent or None counts as missing
    - Missing fields reported in schema order (deterministic messages)
    - Never calls the handler: raises before any IO

Design Decisions:
    - Presence check separate from pydantic parsing: the descriptor's required
      list is the advertised contract, pydantic enforces types afterwards
"""

from collections.abc import Mapping
from typing import Any

from gtasks_mcp.core.domain_types import OperationDescriptor
from gtasks_mcp.core.errors import ErrorContext, InvalidArgumentsError


def find_missing_fields(
    descriptor: OperationDescriptor, arguments: Mapping[str, Any],
) -> list[str]:
    return [
        name for name in descriptor.required_fields
        if arguments.get(name) is None
    ]


def check_required_fields(
    descriptor: OperationDescriptor, arguments: Mapping[str, Any],
) -> None:
    """Raise InvalidArgumentsError when a required field is missing."""
    missing = find_missing_fields(descriptor, arguments)
    if missing:
        raise InvalidArgumentsError(
            f"Missing required argument(s) for '{descriptor.name}': "
            f"{', '.join(missing)}",
            missing=missing,
            context=ErrorContext(operation=descriptor.name),
        )
