"""Google Tasks MCP Package — exposes Google Tasks to MCP clients over stdio and HTTP/SSE.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
