"""Todo Routes: CRUD over /todos backed by the app's TodoBackend.

Invariants:
    - Request bodies validated by Pydantic before reaching the handler
    - Unknown ids surface as NotFoundError, mapped to 404 by the global handler
    - DELETE returns 204 with no body

Design Decisions:
    - Backend read from app.state via dependency: tests get a fresh backend
      per app instance without module-level globals
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from todo_sync.api.todo_backend import TodoBackend
from todo_sync.schemas.todo import TodoCreate, TodoRead, TodoUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/todos", tags=["todos"])


def get_backend(request: Request) -> TodoBackend:
    return request.app.state.todo_backend


@router.get("", response_model=list[TodoRead])
async def list_todos(backend: TodoBackend = Depends(get_backend)):
    return [TodoRead.from_item(todo) for todo in backend.list_all()]


@router.post(
    "", response_model=TodoRead, status_code=status.HTTP_201_CREATED,
)
async def create_todo(
    body: TodoCreate, backend: TodoBackend = Depends(get_backend),
):
    return TodoRead.from_item(backend.create(body))


@router.put("/{todo_id}", response_model=TodoRead)
async def update_todo(
    todo_id: int, body: TodoUpdate,
    backend: TodoBackend = Depends(get_backend),
):
    return TodoRead.from_item(backend.update(todo_id, body))


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: int, backend: TodoBackend = Depends(get_backend),
):
    backend.delete(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
