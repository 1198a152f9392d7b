"""Core Layer — pure domain logic, no IO, no network, no settings access.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: formatters and argument
      checks are testable without a Google account
"""
