"""Boundary Protocol: contract between the controller and the remote todo store.

Invariants:
    - Core never imports an implementation; the shell injects one
    - Every method raises TransportError or RemoteError on failure, never
      a transport library's own exception type
    - Implementations never retry; retry policy belongs to the caller

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, core functions that plan the
      calls stay synchronous
"""

from typing import Any, Protocol

from todo_sync.core.domain_types import TodoId, TodoItem


class SyncClient(Protocol):
    """Remote CRUD surface for task items."""
    async def fetch_all(self) -> list[TodoItem]: ...
    async def create(self, text: str) -> TodoItem: ...
    async def update(self, item_id: TodoId, patch: dict[str, Any]) -> None: ...
    async def delete(self, item_id: TodoId) -> None: ...
