"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - All Google calls wrapped with timeout and error mapping
    - Blocking SDK calls run off the event loop
"""
