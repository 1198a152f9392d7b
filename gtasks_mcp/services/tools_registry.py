"""Tools Registry — fixed, ordered tool catalog and policy-based filtering.

Invariants:
    - ALL_TOOLS order is the advertised order on every transport
    - list_available() under read-only policy returns only read-only tools, same order
    - Tool names are unique (checked at import)
    - No runtime add/remove: the catalog is fixed per process

Design Decisions:
    - Explicit imports from each define_*_tools.py: no auto-discovery
    - Tuple over list: the catalog cannot be mutated by callers
"""

from gtasks_mcp.core.domain_types import AccessPolicy, OperationDescriptor
from gtasks_mcp.services.define_auth_tools import TOOLS_AUTH
from gtasks_mcp.services.define_task_list_tools import TOOLS_TASK_LISTS
from gtasks_mcp.services.define_task_tools import TOOLS_TASKS


ALL_TOOLS: tuple[OperationDescriptor, ...] = (
    *TOOLS_TASK_LISTS,      # 5 tools
    *TOOLS_TASKS,           # 7 tools
    *TOOLS_AUTH,            # 1 tool
)
# Total: 13

_BY_NAME: dict[str, OperationDescriptor] = {t.name: t for t in ALL_TOOLS}
if len(_BY_NAME) != len(ALL_TOOLS):
    raise RuntimeError("Duplicate tool name in ALL_TOOLS")

READ_ONLY_TOOLS: frozenset[str] = frozenset(
    t.name for t in ALL_TOOLS if not t.mutating
)
MUTATING_TOOLS: frozenset[str] = frozenset(
    t.name for t in ALL_TOOLS if t.mutating
)


def get_descriptor(name: str) -> OperationDescriptor | None:
    return _BY_NAME.get(name)


def list_available(policy: AccessPolicy) -> list[OperationDescriptor]:
    """Tools the policy allows, in catalog order."""
    if policy.allows_mutation:
        return list(ALL_TOOLS)
    return [t for t in ALL_TOOLS if not t.mutating]
