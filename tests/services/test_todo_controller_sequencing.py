"""Todo Controller: per-item sequencing, stale operations and retry policy.

Tests cover:
    - Overlapping operations on one item reach the remote in issue order
    - Operations on different items run concurrently
    - An earlier failure does not undo a later successful change
    - Operations queued behind a successful delete are never sent
    - Per-item locks survive while any task holds or awaits them
    - TransportError retried up to sync_max_retries; RemoteError never retried
"""

import asyncio

from todo_sync.core.domain_types import TodoItem
from todo_sync.core.errors import RemoteError, TransportError
from todo_sync.core.intents import Intent
from todo_sync.services.todo_controller import TodoController

from tests.services.fake_sync_client import FakeSyncClient

MILK = TodoItem(1, "Buy milk")
DOG = TodoItem(2, "Walk dog")


async def _loaded(*items):
    client = FakeSyncClient(items)
    controller = TodoController(client)
    await controller.load()
    client.calls.clear()
    return controller, client


# ─── Sequencing ──────────────────────────────────────────────────

async def test_overlapping_toggles_reach_remote_in_issue_order():
    controller, client = await _loaded(MILK)
    release = client.hold_next("update")
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.toggle(1))
    await asyncio.sleep(0)

    # second toggle waits for the first to resolve
    assert client.calls_of("update") == [(1, {"text": "Buy milk", "completed": True})]

    release.set()
    await controller.drain()
    assert client.calls_of("update") == [
        (1, {"text": "Buy milk", "completed": True}),
        (1, {"text": "Buy milk", "completed": False}),
    ]
    assert client.remote[1] == MILK
    assert controller.snapshot().items == (MILK,)


async def test_operations_on_different_items_run_concurrently():
    controller, client = await _loaded(MILK, DOG)
    release = client.hold_next("update")
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.toggle(2))
    await asyncio.sleep(0)
    assert [args[0] for args in client.calls_of("update")] == [1, 2]
    release.set()
    await controller.drain()
    assert all(t.completed for t in controller.snapshot().items)


async def test_failed_toggle_keeps_later_confirmed_edit():
    controller, client = await _loaded(MILK)
    client.fail_next("update", TransportError("connection reset"))
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.start_edit(1))
    controller.dispatch(Intent.update_draft("Buy bread"))
    controller.dispatch(Intent.save_edit())
    await controller.drain()

    expected = TodoItem(1, "Buy bread", completed=False)
    assert controller.snapshot().items == (expected,)
    assert client.remote[1] == expected
    assert controller.snapshot().pending_ids == frozenset()


async def test_operations_queued_behind_delete_are_skipped():
    controller, client = await _loaded(MILK)
    release = client.hold_next("delete")
    controller.dispatch(Intent.delete(1))
    controller.dispatch(Intent.toggle(1))
    release.set()
    await controller.drain()
    assert client.calls_of("update") == []
    assert controller.snapshot().items == ()
    assert controller.snapshot().last_failure is None


async def test_last_resolution_wins_for_unsequenced_loads():
    controller, client = await _loaded(MILK)
    slow = client.hold_next("fetch_all")
    controller.dispatch(Intent.load())
    client.remote[2] = DOG
    await controller.load()
    assert len(controller.snapshot().items) == 2

    del client.remote[2]
    slow.set()
    await controller.drain()
    # the first-issued load resolved last and its result stands
    assert controller.snapshot().items == (MILK,)


async def test_item_locks_are_released_after_drain():
    controller, client = await _loaded(MILK, DOG)
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.delete(2))
    await controller.drain()
    assert controller._item_locks == {}


async def test_order_holds_when_reloads_drop_and_restore_a_queued_item():
    controller, client = await _loaded(MILK)
    release = client.hold_next("update")
    controller.dispatch(Intent.toggle(1))
    controller.dispatch(Intent.toggle(1))
    await asyncio.sleep(0)

    del client.remote[1]
    await controller.load()
    client.remote[1] = MILK
    await controller.load()
    controller.dispatch(Intent.toggle(1))
    await asyncio.sleep(0)

    # the newest toggle still queues behind the held first one
    assert len(client.calls_of("update")) == 1
    release.set()
    await controller.drain()
    assert [args[1]["completed"] for args in client.calls_of("update")] == [
        True, False, True,
    ]
    assert client.remote[1].completed is True


# ─── Retry policy ────────────────────────────────────────────────

async def test_transport_errors_are_retried_until_success():
    controller, client = await _loaded(MILK)
    controller.max_retries = 2
    controller.base_delay_ms = 0
    client.fail_next("update", TransportError("refused"))
    client.fail_next("update", TransportError("refused"))
    await controller.toggle(1)
    assert len(client.calls_of("update")) == 3
    assert controller.snapshot().last_failure is None
    assert client.remote[1].completed is True


async def test_retries_exhausted_reports_failure():
    controller, client = await _loaded(MILK)
    controller.max_retries = 1
    controller.base_delay_ms = 0
    for _ in range(2):
        client.fail_next("update", TransportError("refused"))
    await controller.toggle(1)
    assert len(client.calls_of("update")) == 2
    assert controller.snapshot().items == (MILK,)
    assert controller.snapshot().last_failure.error_code == "TRANSPORT_ERROR"


async def test_remote_errors_are_never_retried():
    controller, client = await _loaded(MILK)
    controller.max_retries = 3
    controller.base_delay_ms = 0
    client.fail_next("delete", RemoteError("Forbidden", 403))
    await controller.delete(1)
    assert len(client.calls_of("delete")) == 1
    assert controller.snapshot().items == (MILK,)


def test_backoff_grows_exponentially_and_is_capped():
    controller = TodoController(FakeSyncClient(), base_delay_ms=1000, max_delay_ms=4000)
    assert 750 <= controller._backoff(0) <= 1250
    assert 1500 <= controller._backoff(1) <= 2500
    assert 3000 <= controller._backoff(5) <= 5000


async def test_negative_retry_count_still_calls_once():
    controller, client = await _loaded(MILK)
    controller.max_retries = -1
    await controller.load()
    assert client.calls_of("fetch_all") == [()]
    assert controller.snapshot().items == (MILK,)
