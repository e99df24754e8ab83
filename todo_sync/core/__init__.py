"""Core Layer: pure synchronization logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Every function is deterministic given its inputs

Design Decisions:
    - Functional core separated from imperative shell: core plans effects,
      services/ runs them and feeds the outcomes back through reconcile
"""
