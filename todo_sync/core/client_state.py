"""Client State: everything the presentation layer renders, owned by the controller.

Invariants:
    - store is the single source of truth for rendering
    - edit and pending are independent structures; none of them does IO
    - snapshot() is an immutable copy, safe to hand to subscribers

Design Decisions:
    - Dataclass aggregate over hidden per-component state: each piece is
      testable alone, the controller owns the whole
    - last_failure holds only the most recent failure: the presentation layer
      shows one banner, full history lives in the logs
"""

from dataclasses import dataclass, field

from todo_sync.core.domain_types import EditStatus, IntentKind, TodoId, TodoItem
from todo_sync.core.edit_session import EditSession
from todo_sync.core.pending_log import PendingLog
from todo_sync.core.todo_store import TodoStore


@dataclass(frozen=True)
class SyncFailure:
    """A remote failure surfaced to the presentation layer."""
    intent: IntentKind
    item_id: TodoId | None
    error_code: str
    message: str


@dataclass(frozen=True)
class Snapshot:
    """Render-ready view of ClientState."""
    items: tuple[TodoItem, ...]
    edit_status: EditStatus
    edit_target: TodoId | None
    draft_text: str
    pending_ids: frozenset
    last_failure: SyncFailure | None = None
    loading: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class ClientState:
    """Aggregate of store, edit session and pending log."""

    store: TodoStore = field(default_factory=TodoStore)
    edit: EditSession = field(default_factory=EditSession)
    pending: PendingLog = field(default_factory=PendingLog)
    last_failure: SyncFailure | None = None
    loads_in_flight: int = 0

    def snapshot(self) -> Snapshot:
        return Snapshot(
            items=tuple(self.store.list()),
            edit_status=self.edit.status,
            edit_target=self.edit.target_id,
            draft_text=self.edit.draft_text,
            pending_ids=self.pending.pending_ids,
            last_failure=self.last_failure,
            loading=self.loads_in_flight > 0,
        )
