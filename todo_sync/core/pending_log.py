"""Pending Log: in-flight mutations per item and the value the remote last confirmed.

Invariants:
    - An item has a confirmed baseline iff it has at least one pending operation
    - Operations on one item are queued in issue order; the shell resolves
      them in that same order (per-item sequencing)
    - projection(id) == confirmed baseline with every still-pending patch
      applied in issue order; this is what the store shows
    - Patches are absolute attribute values, so re-applying one is idempotent

Design Decisions:
    - Rebase instead of blind revert: a failed operation drops only its own
      patch, later optimistic changes on the same item survive
    - Delete is logged with an empty patch so pending_ids covers every
      request in flight, not only optimistic ones
"""

from dataclasses import dataclass, field
from typing import Any

from todo_sync.core.domain_types import IntentKind, TodoId, TodoItem
from todo_sync.core.errors import NotFoundError


@dataclass(frozen=True)
class PendingOperation:
    """One remote mutation that has been issued but not resolved."""
    op_id: int
    item_id: TodoId
    kind: IntentKind
    patch: dict[str, Any]


@dataclass
class PendingLog:
    """Per-item pending operations and confirmed baselines. Pure, no IO."""

    confirmed: dict[TodoId, TodoItem] = field(default_factory=dict)
    queues: dict[TodoId, list[PendingOperation]] = field(default_factory=dict)
    next_op_id: int = 1

    @property
    def pending_ids(self) -> frozenset:
        return frozenset(self.queues)

    def is_pending(self, item_id: TodoId) -> bool:
        return item_id in self.queues

    def operations(self, item_id: TodoId) -> list[PendingOperation]:
        return list(self.queues.get(item_id, []))

    def is_live(self, op: PendingOperation) -> bool:
        """False once op was resolved or its item forgotten (deleted)."""
        return op in self.queues.get(op.item_id, [])

    def record(
        self, before: TodoItem, kind: IntentKind, patch: dict[str, Any],
    ) -> PendingOperation:
        """Log an operation against `before`, the value currently shown."""
        if before.id not in self.queues:
            self.confirmed[before.id] = before
            self.queues[before.id] = []
        op = PendingOperation(self.next_op_id, before.id, kind, dict(patch))
        self.next_op_id += 1
        self.queues[before.id].append(op)
        return op

    def confirm(self, op: PendingOperation) -> TodoItem:
        """Fold op into the confirmed baseline. Returns the new projection."""
        baseline = self._take(op)
        confirmed = baseline.with_patch(op.patch)
        return self._settle(op.item_id, confirmed)

    def fail(self, op: PendingOperation) -> TodoItem:
        """Drop op without touching the baseline. Returns the new projection."""
        baseline = self._take(op)
        return self._settle(op.item_id, baseline)

    def rebase(self, fetched: TodoItem) -> TodoItem:
        """Adopt a freshly fetched value as baseline, keep pending patches."""
        if fetched.id not in self.queues:
            return fetched
        self.confirmed[fetched.id] = fetched
        return self.projection(fetched.id)

    def projection(self, item_id: TodoId) -> TodoItem:
        if item_id not in self.confirmed:
            raise NotFoundError("Pending todo", item_id)
        item = self.confirmed[item_id]
        for op in self.queues.get(item_id, []):
            item = item.with_patch(op.patch)
        return item

    def forget(self, item_id: TodoId) -> None:
        self.confirmed.pop(item_id, None)
        self.queues.pop(item_id, None)

    def _take(self, op: PendingOperation) -> TodoItem:
        queue = self.queues.get(op.item_id, [])
        if op not in queue:
            raise NotFoundError("Pending operation", op.op_id)
        queue.remove(op)
        return self.confirmed[op.item_id]

    def _settle(self, item_id: TodoId, baseline: TodoItem) -> TodoItem:
        self.confirmed[item_id] = baseline
        projected = self.projection(item_id)
        if not self.queues[item_id]:
            self.forget(item_id)
        return projected
