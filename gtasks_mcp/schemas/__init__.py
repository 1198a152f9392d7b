"""Pydantic Schemas — per-tool argument models validated at the dispatch boundary.

Invariants:
    - Schemas validate at system boundary (tool call arguments from MCP clients)
    - Wire names (camelCase) accepted via aliases; Python code uses snake_case
"""
