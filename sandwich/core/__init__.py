"""Core Layer: pure domain logic, no IO, no async, no shared state.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Everything here is deterministic given its inputs

Design Decisions:
    - Functional core separated from imperative shell (ADR: rule engine and
      cache key must be testable without a backend)
"""
