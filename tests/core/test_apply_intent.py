"""Intent Planning: tests for local mutations and planned effects per intent.

Tests cover:
    - LOAD and ADD plan a remote call and leave the store alone
    - Blank ADD plans nothing
    - TOGGLE flips optimistically and sends the full attribute set
    - DELETE is not optimistic
    - SAVE_EDIT applies text optimistically; blank drafts plan nothing
    - Unknown ids raise NotFoundError
"""

import pytest

from todo_sync.core.apply_intent import apply_intent
from todo_sync.core.client_state import ClientState
from todo_sync.core.domain_types import EditStatus, EffectKind, IntentKind, TodoItem
from todo_sync.core.errors import NotFoundError
from todo_sync.core.intents import Intent

MILK = TodoItem(1, "Buy milk")


def _state(*items):
    state = ClientState()
    for item in items:
        state.store.add(item)
    return state


# ─── LOAD / ADD ──────────────────────────────────────────────────

def test_load_plans_fetch_all_and_marks_loading():
    state = _state()
    effects = apply_intent(state, Intent.load())
    assert [e.kind for e in effects] == [EffectKind.FETCH_ALL]
    assert state.snapshot().loading


def test_add_plans_create_without_touching_store():
    state = _state()
    effects = apply_intent(state, Intent.add("Buy milk"))
    assert len(effects) == 1
    assert effects[0].kind == EffectKind.CREATE
    assert effects[0].payload == {"text": "Buy milk", "completed": False}
    assert state.store.list() == []


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_add_blank_text_plans_nothing(text):
    state = _state()
    assert apply_intent(state, Intent.add(text)) == []


# ─── TOGGLE ──────────────────────────────────────────────────────

def test_toggle_flips_completed_before_any_call():
    state = _state(MILK)
    effects = apply_intent(state, Intent.toggle(1))
    assert state.store.find(1).completed is True
    assert effects[0].kind == EffectKind.UPDATE
    assert effects[0].payload == {"text": "Buy milk", "completed": True}
    assert effects[0].op.kind == IntentKind.TOGGLE
    assert state.pending.is_pending(1)


def test_toggle_twice_restores_original_value():
    state = _state(MILK)
    apply_intent(state, Intent.toggle(1))
    effects = apply_intent(state, Intent.toggle(1))
    assert state.store.find(1) == MILK
    assert effects[0].payload["completed"] is False


def test_toggle_unknown_id_raises_not_found():
    with pytest.raises(NotFoundError):
        apply_intent(_state(MILK), Intent.toggle(42))


# ─── DELETE ──────────────────────────────────────────────────────

def test_delete_keeps_item_until_confirmed():
    state = _state(MILK)
    effects = apply_intent(state, Intent.delete(1))
    assert state.store.find(1) == MILK
    assert effects[0].kind == EffectKind.DELETE
    assert effects[0].sequence_key == 1
    assert state.snapshot().pending_ids == frozenset({1})


# ─── EDIT ────────────────────────────────────────────────────────

def test_edit_flow_applies_saved_text_optimistically():
    state = _state(MILK)
    apply_intent(state, Intent.start_edit(1))
    apply_intent(state, Intent.update_draft("Buy bread"))
    snap = state.snapshot()
    assert (snap.edit_status, snap.edit_target, snap.draft_text) == (
        EditStatus.EDITING, 1, "Buy bread",
    )

    effects = apply_intent(state, Intent.save_edit())

    assert state.store.find(1).text == "Buy bread"
    assert state.edit.status == EditStatus.IDLE
    assert effects[0].payload == {"text": "Buy bread"}


def test_save_edit_blank_draft_plans_nothing_and_keeps_editing():
    state = _state(MILK)
    apply_intent(state, Intent.start_edit(1))
    apply_intent(state, Intent.update_draft("  "))
    assert apply_intent(state, Intent.save_edit()) == []
    assert state.edit.status == EditStatus.EDITING
    assert state.store.find(1) == MILK
    assert not state.pending.is_pending(1)


def test_cancel_edit_leaves_store_unchanged():
    state = _state(MILK)
    apply_intent(state, Intent.start_edit(1))
    apply_intent(state, Intent.update_draft("anything"))
    assert apply_intent(state, Intent.cancel_edit()) == []
    assert state.edit.status == EditStatus.IDLE
    assert state.store.list() == [MILK]


def test_save_edit_for_missing_target_raises_and_keeps_draft():
    state = _state(MILK)
    apply_intent(state, Intent.start_edit(1))
    apply_intent(state, Intent.update_draft("Buy bread"))
    state.store.remove(1)
    with pytest.raises(NotFoundError) as exc:
        apply_intent(state, Intent.save_edit())
    assert exc.value.context.intent == IntentKind.SAVE_EDIT.value
    assert state.edit.status == EditStatus.EDITING
    assert state.edit.draft_text == "Buy bread"


def test_start_edit_unknown_id_raises_not_found():
    with pytest.raises(NotFoundError):
        apply_intent(_state(), Intent.start_edit(1))
