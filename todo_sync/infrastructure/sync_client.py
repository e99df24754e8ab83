"""HTTP Sync Client: httpx implementation of the SyncClient protocol.

Invariants:
    - Timeouts map to TransportError(timeout=True); other httpx transport
      failures map to TransportError
    - Non-2xx responses, bodies that fail TodoRead validation and lists that
      repeat an id map to RemoteError
    - Outgoing bodies are sent as built; the remote store owns text validation
      and answers a bad body with a status the controller reconciles
    - No retries here; the controller owns retry policy
    - update() and delete() ignore the response body (implementation-defined)

Design Decisions:
    - One AsyncClient per HttpSyncClient: connection pooling across calls,
      closed via aclose() / async with
    - transport parameter: tests inject httpx.MockTransport or ASGITransport
      without monkeypatching
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from todo_sync.config import Settings
from todo_sync.core.domain_types import TodoId, TodoItem
from todo_sync.core.errors import ErrorContext, RemoteError, TransportError
from todo_sync.schemas.todo import TodoRead

logger = logging.getLogger(__name__)

_TODO_LIST = TypeAdapter(list[TodoRead])
_PATCH_FIELDS = ("text", "completed")


class HttpSyncClient:
    """Talks to a remote /todos REST store."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpSyncClient":
        return cls(
            settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpSyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── SyncClient protocol ────────────────────────────────────

    async def fetch_all(self) -> list[TodoItem]:
        response = await self._send("GET", "/todos", "fetch_all")
        try:
            rows = _TODO_LIST.validate_json(response.content)
        except ValidationError as e:
            raise RemoteError(
                f"malformed todo list: {e.error_count()} error(s)",
                response.status_code, ErrorContext(operation="fetch_all"),
            )
        seen = set()
        for row in rows:
            if row.id in seen:
                raise RemoteError(
                    f"malformed todo list: duplicate id {row.id!r}",
                    response.status_code,
                    ErrorContext(item_id=row.id, operation="fetch_all"),
                )
            seen.add(row.id)
        return [row.to_item() for row in rows]

    async def create(self, text: str) -> TodoItem:
        body = {"text": text, "completed": False}
        response = await self._send("POST", "/todos", "create", json=body)
        try:
            return TodoRead.model_validate_json(response.content).to_item()
        except ValidationError as e:
            raise RemoteError(
                f"malformed created todo: {e.error_count()} error(s)",
                response.status_code, ErrorContext(operation="create"),
            )

    async def update(self, item_id: TodoId, patch: dict[str, Any]) -> None:
        body = {k: patch[k] for k in _PATCH_FIELDS if k in patch}
        await self._send(
            "PUT", f"/todos/{item_id}", "update", item_id=item_id, json=body,
        )

    async def delete(self, item_id: TodoId) -> None:
        await self._send("DELETE", f"/todos/{item_id}", "delete", item_id=item_id)

    # ─── Transport ──────────────────────────────────────────────

    async def _send(
        self, method: str, path: str, operation: str,
        item_id: TodoId | None = None, json: Any = None,
    ) -> httpx.Response:
        """Send one request and map every failure into the error hierarchy."""
        context = ErrorContext(item_id=item_id, operation=operation)
        try:
            response = await self.client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"{method} {path} timed out", timeout=True, context=context,
            ) from e
        except httpx.TransportError as e:
            raise TransportError(f"{method} {path}: {e}", context=context) from e

        if not response.is_success:
            raise RemoteError(
                _describe(response), response.status_code, context,
            )
        logger.debug(
            "Remote call succeeded",
            extra={
                "method": method, "path": path,
                "status_code": response.status_code, "item_id": item_id,
            },
        )
        return response


def _describe(response: httpx.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("detail"):
            return str(body["detail"])
    return response.reason_phrase
