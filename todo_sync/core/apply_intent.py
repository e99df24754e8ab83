"""Intent Planning: turns one intent into local mutations plus the remote calls to run.

Invariants:
    - apply_intent mutates ClientState synchronously and returns the effects;
      it never performs IO
    - ADD and DELETE are not optimistic: the store changes only on confirmation
    - TOGGLE and SAVE_EDIT are optimistic: the store changes now and the
      previous value is recorded in the pending log for rebase on failure
    - Blank ADD text and blank SAVE_EDIT drafts produce no effects
    - TOGGLE flips the value currently shown, so two toggles cancel out

Design Decisions:
    - Explicit dict from IntentKind to handler: every mapping visible, no getattr magic
    - TOGGLE sends the full attribute set, SAVE_EDIT sends only text: same wire
      shape as the PUT body the remote store already accepts
    - Unknown ids on TOGGLE/DELETE/START_EDIT raise NotFoundError: the
      presentation layer only offers ids it rendered
    - SAVE_EDIT on a target missing from the store raises NotFoundError before
      the session is touched, so the draft stays open
"""

from collections.abc import Callable

from todo_sync.core.client_state import ClientState
from todo_sync.core.domain_types import EffectKind, IntentKind, TodoId, TodoItem
from todo_sync.core.errors import ErrorContext, NotFoundError
from todo_sync.core.intents import Effect, Intent


def apply_intent(state: ClientState, intent: Intent) -> list[Effect]:
    """Apply intent to state and return the remote calls it requires."""
    return _HANDLERS[intent.kind](state, intent)


def _load(state: ClientState, intent: Intent) -> list[Effect]:
    state.loads_in_flight += 1
    return [Effect(EffectKind.FETCH_ALL, intent.kind)]


def _add(state: ClientState, intent: Intent) -> list[Effect]:
    text = intent.text or ""
    if not text.strip():
        return []
    return [Effect(
        EffectKind.CREATE, intent.kind,
        payload={"text": text, "completed": False},
    )]


def _toggle(state: ClientState, intent: Intent) -> list[Effect]:
    item = _require(state, intent)
    patch = {"text": item.text, "completed": not item.completed}
    op = state.pending.record(item, intent.kind, patch)
    state.store.replace(item.id, item.with_patch(patch))
    return [Effect(EffectKind.UPDATE, intent.kind, item.id, patch, op)]


def _delete(state: ClientState, intent: Intent) -> list[Effect]:
    item = _require(state, intent)
    op = state.pending.record(item, intent.kind, {})
    return [Effect(EffectKind.DELETE, intent.kind, item.id, op=op)]


def _start_edit(state: ClientState, intent: Intent) -> list[Effect]:
    state.edit.start(_require(state, intent))
    return []


def _update_draft(state: ClientState, intent: Intent) -> list[Effect]:
    state.edit.update_draft(intent.text or "")
    return []


def _save_edit(state: ClientState, intent: Intent) -> list[Effect]:
    target_id = state.edit.target_id
    if target_id is not None and target_id not in state.store:
        raise NotFoundError(
            "Todo", target_id, ErrorContext(intent=intent.kind.value),
        )
    commit = state.edit.save()
    if commit is None:
        return []
    item = state.store.find(commit.target_id)
    patch = {"text": commit.text}
    op = state.pending.record(item, intent.kind, patch)
    state.store.replace(item.id, item.with_patch(patch))
    return [Effect(EffectKind.UPDATE, intent.kind, item.id, patch, op)]


def _cancel_edit(state: ClientState, intent: Intent) -> list[Effect]:
    state.edit.cancel()
    return []


def _require(state: ClientState, intent: Intent) -> TodoItem:
    item_id: TodoId | None = intent.item_id
    item = state.store.find(item_id) if item_id is not None else None
    if item is None:
        raise NotFoundError(
            "Todo", item_id, ErrorContext(intent=intent.kind.value),
        )
    return item


_HANDLERS: dict[IntentKind, Callable[[ClientState, Intent], list[Effect]]] = {
    IntentKind.LOAD: _load,
    IntentKind.ADD: _add,
    IntentKind.TOGGLE: _toggle,
    IntentKind.DELETE: _delete,
    IntentKind.START_EDIT: _start_edit,
    IntentKind.UPDATE_DRAFT: _update_draft,
    IntentKind.SAVE_EDIT: _save_edit,
    IntentKind.CANCEL_EDIT: _cancel_edit,
}
