"""Todo Backend: in-memory storage behind the reference remote store.

Invariants:
    - Ids are integers assigned from 1 in creation order, never reused
    - list_all() returns items in creation order
    - update()/delete() raise NotFoundError for unknown ids

Design Decisions:
    - dict keyed by id: Python dicts keep insertion order, which is the
      ordering contract of GET /todos
    - Stored as TodoItem (frozen): updates produce a new value, no aliasing
      between responses and storage
"""

import itertools
import logging

from todo_sync.core.domain_types import TodoItem
from todo_sync.core.errors import NotFoundError
from todo_sync.schemas.todo import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


class TodoBackend:
    """Simple in-memory todo storage."""

    def __init__(self) -> None:
        self._todos: dict[int, TodoItem] = {}
        self._ids = itertools.count(1)

    def list_all(self) -> list[TodoItem]:
        return list(self._todos.values())

    def get(self, todo_id: int) -> TodoItem:
        todo = self._todos.get(todo_id)
        if todo is None:
            raise NotFoundError("Todo", todo_id)
        return todo

    def create(self, data: TodoCreate) -> TodoItem:
        todo = TodoItem(id=next(self._ids), text=data.text, completed=data.completed)
        self._todos[todo.id] = todo
        logger.info("Todo created", extra={"item_id": todo.id})
        return todo

    def update(self, todo_id: int, data: TodoUpdate) -> TodoItem:
        updated = self.get(todo_id).with_patch(data.changes())
        self._todos[todo_id] = updated
        return updated

    def delete(self, todo_id: int) -> None:
        self.get(todo_id)
        del self._todos[todo_id]
        logger.info("Todo deleted", extra={"item_id": todo_id})
