"""API Layer — FastAPI routes, MCP protocol adapter, security middleware, error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Transports translate error kinds to protocol codes, never invent new semantics
"""
