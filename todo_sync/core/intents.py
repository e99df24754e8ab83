"""Intents & Effects: the commands the controller accepts and the remote calls it plans.

Invariants:
    - Intent is an immutable value; each IntentKind uses a fixed subset of fields
    - Effect carries everything the shell needs to run one remote call; item
      effects carry the PendingOperation they resolve

Design Decisions:
    - Constructor helpers (Intent.toggle(...)) over one class per intent: a
      single dispatch table in apply_intent, every mapping visible in one place
"""

from dataclasses import dataclass, field
from typing import Any

from todo_sync.core.domain_types import EffectKind, IntentKind, TodoId
from todo_sync.core.pending_log import PendingOperation


@dataclass(frozen=True)
class Intent:
    """A user intent dispatched to the controller."""
    kind: IntentKind
    item_id: TodoId | None = None
    text: str | None = None

    @classmethod
    def load(cls) -> "Intent":
        return cls(IntentKind.LOAD)

    @classmethod
    def add(cls, text: str) -> "Intent":
        return cls(IntentKind.ADD, text=text)

    @classmethod
    def toggle(cls, item_id: TodoId) -> "Intent":
        return cls(IntentKind.TOGGLE, item_id=item_id)

    @classmethod
    def delete(cls, item_id: TodoId) -> "Intent":
        return cls(IntentKind.DELETE, item_id=item_id)

    @classmethod
    def start_edit(cls, item_id: TodoId) -> "Intent":
        return cls(IntentKind.START_EDIT, item_id=item_id)

    @classmethod
    def update_draft(cls, text: str) -> "Intent":
        return cls(IntentKind.UPDATE_DRAFT, text=text)

    @classmethod
    def save_edit(cls) -> "Intent":
        return cls(IntentKind.SAVE_EDIT)

    @classmethod
    def cancel_edit(cls) -> "Intent":
        return cls(IntentKind.CANCEL_EDIT)


@dataclass(frozen=True)
class Effect:
    """A remote call planned by the core, executed by the shell."""
    kind: EffectKind
    intent: IntentKind
    item_id: TodoId | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    op: PendingOperation | None = None

    @property
    def sequence_key(self) -> TodoId | None:
        """Per-item ordering key; None means the call is not sequenced."""
        return self.item_id if self.op is not None else None
