"""Edit Session: state machine for in-place text editing of one item.

Invariants:
    - target_id is not None if and only if status is EDITING
    - At most one item is in edit mode; start() on another item drops the
      previous draft without saving it
    - save() with a blank draft is refused and the session stays EDITING
    - cancel() always lands in IDLE

Design Decisions:
    - save() hands back an EditCommit instead of calling the network: the
      controller decides what to do with accepted text
    - update_draft() in IDLE returns False instead of raising: late keystroke
      events after a cancel are expected from the presentation layer
"""

from dataclasses import dataclass

from todo_sync.core.domain_types import EditStatus, TodoId, TodoItem


@dataclass(frozen=True)
class EditCommit:
    """Accepted edit, ready to be applied and sent."""
    target_id: TodoId
    text: str


@dataclass
class EditSession:
    """Per-collection edit state. Pure dataclass, no IO."""

    target_id: TodoId | None = None
    draft_text: str = ""

    @property
    def status(self) -> EditStatus:
        return EditStatus.IDLE if self.target_id is None else EditStatus.EDITING

    @property
    def is_editing(self) -> bool:
        return self.target_id is not None

    def start(self, item: TodoItem) -> TodoId | None:
        """Enter EDITING for item. Returns the id of an edit it replaced."""
        previous = self.target_id if self.target_id != item.id else None
        self.target_id = item.id
        self.draft_text = item.text
        return previous

    def update_draft(self, text: str) -> bool:
        if not self.is_editing:
            return False
        self.draft_text = text
        return True

    def save(self) -> EditCommit | None:
        """Accept the draft if non-blank. Moves to IDLE only on acceptance."""
        if self.target_id is None or not self.draft_text.strip():
            return None
        commit = EditCommit(self.target_id, self.draft_text)
        self.cancel()
        return commit

    def cancel(self) -> None:
        self.target_id = None
        self.draft_text = ""
