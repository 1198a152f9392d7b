"""Services Layer — tool descriptors, registry, handlers, and tool dispatch.

Invariants:
    - Handlers split by resource (task lists, tasks)
    - Tool dispatch uses explicit dict mapping (no auto-discovery)
"""
