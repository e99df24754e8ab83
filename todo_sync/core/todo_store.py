"""Todo Store: authoritative in-memory ordered collection of task items.

Invariants:
    - Exactly one item per id at any time
    - Order is fetch/insertion order; replace() keeps the item's position
    - Precondition violations raise NotFoundError / DuplicateIdError and leave
      the collection untouched

Design Decisions:
    - Plain list + linear scan: collections are small and order is the contract
    - reset() validates the whole batch before swapping so a bad fetch never
      half-applies
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from todo_sync.core.domain_types import TodoId, TodoItem
from todo_sync.core.errors import DuplicateIdError, NotFoundError


@dataclass
class TodoStore:
    """Ordered item collection. Pure data, no IO."""

    _items: list[TodoItem] = field(default_factory=list)

    def list(self) -> list[TodoItem]:
        return list(self._items)

    def find(self, item_id: TodoId) -> TodoItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(self, item: TodoItem) -> None:
        if self.find(item.id) is not None:
            raise DuplicateIdError(item.id)
        self._items.append(item)

    def replace(self, item_id: TodoId, new_item: TodoItem) -> None:
        if new_item.id != item_id:
            raise ValueError(
                f"replacement id {new_item.id!r} does not match {item_id!r}",
            )
        self._items[self._index_of(item_id)] = new_item

    def remove(self, item_id: TodoId) -> None:
        del self._items[self._index_of(item_id)]

    def reset(self, items: Iterable[TodoItem]) -> None:
        """Replace the whole collection, keeping the given order."""
        incoming = list(items)
        seen: set[TodoId] = set()
        for item in incoming:
            if item.id in seen:
                raise DuplicateIdError(item.id)
            seen.add(item.id)
        self._items = incoming

    def _index_of(self, item_id: TodoId) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise NotFoundError("Todo", item_id)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(list(self._items))
