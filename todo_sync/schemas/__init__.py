"""Pydantic Schemas: wire contracts for the /todos REST surface.

Invariants:
    - Schemas validate at the system boundary (HTTP requests and responses)
    - Core works on TodoItem dataclasses; conversion happens here

Design Decisions:
    - Shared by client and reference store: both sides agree on one contract
"""
