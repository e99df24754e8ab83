"""Todo Schemas: Pydantic models with field-level validation for the /todos surface.

Invariants:
    - TodoCreate.text and TodoUpdate.text are never blank (whitespace-only rejected)
    - Text is stored as typed; only the blank check strips
    - TodoUpdate accepts a full or partial attribute set; unset fields are not applied
    - TodoCreate/TodoUpdate guard the reference store's request bodies; the
      client only parses responses (TodoRead) and leaves body checks to the store

Design Decisions:
    - id typed int | str: the remote store owns id format, the client treats it as opaque
    - extra="ignore" on TodoRead: servers may add fields (timestamps) we do not render
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todo_sync.core.domain_types import TodoItem


def _reject_blank(v: str | None) -> str | None:
    if v is not None and not v.strip():
        raise ValueError("text cannot be empty or whitespace")
    return v


class TodoCreate(BaseModel):
    """POST /todos body."""
    text: str = Field(min_length=1, max_length=10_000)
    completed: bool = False

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        return _reject_blank(v)


class TodoUpdate(BaseModel):
    """PUT /todos/{id} body, full or partial."""
    model_config = ConfigDict(extra="ignore")

    text: str | None = Field(None, max_length=10_000)
    completed: bool | None = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str | None) -> str | None:
        return _reject_blank(v)

    def changes(self) -> dict:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TodoRead(BaseModel):
    """A task item as the remote store returns it."""
    model_config = ConfigDict(extra="ignore")

    id: int | str
    text: str
    completed: bool = False

    def to_item(self) -> TodoItem:
        return TodoItem(id=self.id, text=self.text, completed=self.completed)

    @classmethod
    def from_item(cls, item: TodoItem) -> "TodoRead":
        return cls(id=item.id, text=item.text, completed=item.completed)
