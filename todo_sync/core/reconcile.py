"""Reconciliation: applies the outcome of a remote call to ClientState.

Invariants:
    - Success of an item mutation folds its patch into the confirmed baseline
    - Failure of an item mutation rebases the item onto its confirmed baseline
      with the remaining pending patches; later optimistic changes survive
    - A failed LOAD leaves the store exactly as it was
    - Outcomes for operations already resolved or forgotten are ignored
    - Items absent from the store (dropped by a reload) are never re-inserted

Design Decisions:
    - Outcomes applied in resolution order (last-resolution-wins); ordering
      between calls on one item is the shell's job (per-item sequencing)
    - CREATE racing a LOAD that already returned the new item replaces it
      in place instead of raising DuplicateIdError
"""

from collections.abc import Sequence

from todo_sync.core.client_state import ClientState, SyncFailure
from todo_sync.core.domain_types import EffectKind, TodoItem
from todo_sync.core.errors import TodoSyncError
from todo_sync.core.intents import Effect


def apply_success(
    state: ClientState, effect: Effect,
    result: TodoItem | Sequence[TodoItem] | None = None,
) -> None:
    """Apply a confirmed remote call."""
    if effect.kind == EffectKind.FETCH_ALL:
        _apply_loaded(state, list(result or []))
    elif effect.kind == EffectKind.CREATE:
        _apply_created(state, result)
    elif effect.kind == EffectKind.DELETE:
        _apply_deleted(state, effect)
    else:
        _apply_updated(state, effect)


def apply_failure(
    state: ClientState, effect: Effect, error: TodoSyncError,
) -> SyncFailure:
    """Undo the optimistic part of a failed call and record the failure."""
    if effect.kind == EffectKind.FETCH_ALL:
        state.loads_in_flight = max(0, state.loads_in_flight - 1)
    op = effect.op
    if op is not None and state.pending.is_live(op):
        projected = state.pending.fail(op)
        if projected.id in state.store:
            state.store.replace(projected.id, projected)
    failure = SyncFailure(
        intent=effect.intent,
        item_id=effect.item_id,
        error_code=error.code,
        message=error.message,
    )
    state.last_failure = failure
    return failure


def _apply_loaded(state: ClientState, items: list[TodoItem]) -> None:
    state.loads_in_flight = max(0, state.loads_in_flight - 1)
    state.store.reset([state.pending.rebase(item) for item in items])
    target = state.edit.target_id
    if target is not None and target not in state.store:
        state.edit.cancel()


def _apply_created(state: ClientState, item: TodoItem | None) -> None:
    if item is None:
        raise ValueError("create confirmation requires the created item")
    if item.id in state.store:
        state.store.replace(item.id, state.pending.rebase(item))
        return
    state.store.add(item)


def _apply_deleted(state: ClientState, effect: Effect) -> None:
    op = effect.op
    if op is None or not state.pending.is_live(op):
        return
    state.pending.forget(op.item_id)
    if op.item_id in state.store:
        state.store.remove(op.item_id)
    if state.edit.target_id == op.item_id:
        state.edit.cancel()


def _apply_updated(state: ClientState, effect: Effect) -> None:
    op = effect.op
    if op is None or not state.pending.is_live(op):
        return
    projected = state.pending.confirm(op)
    if projected.id in state.store:
        state.store.replace(projected.id, projected)
