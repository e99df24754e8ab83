"""Todo Controller: imperative shell around the pure planning/reconciliation core.

Invariants:
    - dispatch() applies the intent locally and notifies before any network IO
    - dispatch() never blocks on the network; effects run as asyncio tasks
    - Remote calls for one item id run one at a time, in issue order
    - An item's lock is dropped only once no task holds or awaits it
    - TransportError/RemoteError are caught here, logged, and surfaced as
      Snapshot.last_failure; they never propagate to the caller
    - NotFoundError/DuplicateIdError are programming errors and propagate
      out of submit()/drain()
    - A failing subscriber never breaks dispatch or reconciliation

Design Decisions:
    - Per-item asyncio.Lock as single-flight queue: asyncio locks wake waiters
      FIFO, so issue order == execution order without an explicit queue
    - Operations already resolved (item deleted meanwhile) are skipped instead
      of sent: the remote would answer 404 for a change nobody can see
    - Retry only TransportError, exponential backoff with ±25% jitter;
      RemoteError means the server saw the request and said no
"""

import asyncio
import itertools
import logging
import random
from collections import Counter
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx

from todo_sync.config import Settings, get_settings
from todo_sync.core.apply_intent import apply_intent
from todo_sync.core.client_state import ClientState, Snapshot
from todo_sync.core.domain_types import EffectKind, TodoId
from todo_sync.core.errors import RemoteError, TransportError
from todo_sync.core.intents import Effect, Intent
from todo_sync.core.reconcile import apply_failure, apply_success
from todo_sync.core.sync_protocol import SyncClient
from todo_sync.infrastructure.sync_client import HttpSyncClient

logger = logging.getLogger(__name__)

Subscriber = Callable[[Snapshot], None]


class TodoController:
    """Routes intents into ClientState and the remote store."""

    def __init__(
        self,
        client: SyncClient,
        state: ClientState | None = None,
        max_retries: int = 0,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
    ):
        self._client = client
        self.state = state or ClientState()
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._subscribers: list[Subscriber] = []
        self._item_locks: dict[TodoId, asyncio.Lock] = {}
        self._lock_users: Counter = Counter()
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls, client: SyncClient, settings: Settings,
    ) -> "TodoController":
        return cls(
            client,
            max_retries=settings.sync_max_retries,
            base_delay_ms=settings.sync_base_delay_ms,
            max_delay_ms=settings.sync_max_delay_ms,
        )

    # ─── Observation ────────────────────────────────────────────

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback for every state change. Returns an unsubscribe."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def dismiss_failure(self) -> None:
        if self.state.last_failure is not None:
            self.state.last_failure = None
            self._notify()

    # ─── Dispatch ───────────────────────────────────────────────

    def dispatch(self, intent: Intent) -> list[asyncio.Task]:
        """Apply intent now, schedule its remote calls, return without waiting."""
        effects = apply_intent(self.state, intent)
        logger.debug(
            f"Intent {intent.kind.value} planned {len(effects)} effect(s)",
            extra={"intent": intent.kind.value, "item_id": intent.item_id},
        )
        self._notify()
        tasks = []
        for effect in effects:
            task = asyncio.create_task(self._run(effect))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)
        return tasks

    async def submit(self, intent: Intent) -> None:
        """Dispatch and wait for this intent's remote calls to resolve."""
        tasks = self.dispatch(intent)
        if tasks:
            await asyncio.gather(*tasks)

    async def drain(self) -> None:
        """Wait until every outstanding remote call has resolved."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ─── Intent shortcuts ───────────────────────────────────────

    async def load(self) -> None:
        await self.submit(Intent.load())

    async def add(self, text: str) -> None:
        await self.submit(Intent.add(text))

    async def toggle(self, item_id: TodoId) -> None:
        await self.submit(Intent.toggle(item_id))

    async def delete(self, item_id: TodoId) -> None:
        await self.submit(Intent.delete(item_id))

    async def start_edit(self, item_id: TodoId) -> None:
        await self.submit(Intent.start_edit(item_id))

    async def update_draft(self, text: str) -> None:
        await self.submit(Intent.update_draft(text))

    async def save_edit(self) -> None:
        await self.submit(Intent.save_edit())

    async def cancel_edit(self) -> None:
        await self.submit(Intent.cancel_edit())

    # ─── Effect execution ───────────────────────────────────────

    async def _run(self, effect: Effect) -> None:
        key = effect.sequence_key
        if key is None:
            await self._execute(effect)
            return
        lock = self._item_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] += 1
        try:
            async with lock:
                await self._execute(effect)
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                self._item_locks.pop(key, None)

    async def _execute(self, effect: Effect) -> None:
        op = effect.op
        if op is not None and not self.state.pending.is_live(op):
            logger.debug(
                "Skipping operation resolved while queued",
                extra={"item_id": effect.item_id, "op_id": op.op_id},
            )
            return
        try:
            result = await self._call_with_retry(effect)
        except (TransportError, RemoteError) as e:
            apply_failure(self.state, effect, e)
            logger.error(
                f"Sync {effect.intent.value} failed: {e.message}",
                extra={
                    "intent": effect.intent.value,
                    "item_id": effect.item_id,
                    "op_id": op.op_id if op else None,
                    "error_code": e.code,
                },
            )
        else:
            apply_success(self.state, effect, result)
            logger.info(
                f"Sync {effect.intent.value} confirmed",
                extra={
                    "intent": effect.intent.value,
                    "item_id": effect.item_id,
                    "op_id": op.op_id if op else None,
                },
            )
        self._notify()

    async def _call_with_retry(self, effect: Effect) -> Any:
        for attempt in itertools.count():
            try:
                return await self._call(effect)
            except TransportError as e:
                if attempt >= self.max_retries:
                    raise
                delay = self._backoff(attempt)
                logger.warning(
                    f"Transport error, retry after {delay}ms: {e.message}",
                    extra={
                        "intent": effect.intent.value,
                        "item_id": effect.item_id,
                        "attempt": attempt + 1,
                    },
                )
                await asyncio.sleep(delay / 1000)

    async def _call(self, effect: Effect) -> Any:
        if effect.kind == EffectKind.FETCH_ALL:
            return await self._client.fetch_all()
        if effect.kind == EffectKind.CREATE:
            return await self._client.create(effect.payload["text"])
        if effect.kind == EffectKind.UPDATE:
            return await self._client.update(effect.item_id, effect.payload)
        return await self._client.delete(effect.item_id)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _notify(self) -> None:
        snapshot = self.state.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Subscriber raised during notification")


@asynccontextmanager
async def connect(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[TodoController]:
    """Controller wired to an HttpSyncClient; drains and closes on exit."""
    settings = settings or get_settings()
    async with HttpSyncClient.from_settings(settings, transport) as client:
        controller = TodoController.from_settings(client, settings)
        try:
            yield controller
        finally:
            await controller.drain()
