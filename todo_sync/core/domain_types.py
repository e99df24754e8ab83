"""Domain Types: task items and the enums shared by core and shell.

Invariants:
    - TodoItem is immutable; every mutation produces a new instance
    - TodoId is opaque: the server assigns it, the client only compares it
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - Frozen dataclass over Pydantic model in core: no validation cost on
      every optimistic mutation, pydantic stays at the wire boundary (schemas/)
    - str Enums: serialize to JSON log fields without custom encoders
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


# ─── Identity Types ──────────────────────────────────────────────

# Servers hand out ints (json-server, the reference store) or strings (uuids)
TodoId = int | str


# ─── Entities ────────────────────────────────────────────────────

@dataclass(frozen=True)
class TodoItem:
    """A task item as held by the local store."""
    id: TodoId
    text: str
    completed: bool = False

    def with_patch(self, patch: dict[str, Any]) -> "TodoItem":
        """Return a copy with the patch's text/completed applied."""
        fields = {k: v for k, v in patch.items() if k in ("text", "completed")}
        return replace(self, **fields)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}


# ─── Enums ───────────────────────────────────────────────────────

class IntentKind(str, Enum):
    """User intents the controller accepts."""
    LOAD = "load"
    ADD = "add"
    TOGGLE = "toggle"
    DELETE = "delete"
    START_EDIT = "start_edit"
    UPDATE_DRAFT = "update_draft"
    SAVE_EDIT = "save_edit"
    CANCEL_EDIT = "cancel_edit"


class EffectKind(str, Enum):
    """Remote calls the core can ask the shell to perform."""
    FETCH_ALL = "fetch_all"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EditStatus(str, Enum):
    """EditSession states."""
    IDLE = "idle"
    EDITING = "editing"
