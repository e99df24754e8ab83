"""Service test fixtures: fake remote store + controller wired to it.

Invariants:
    - Every test gets a fresh FakeSyncClient and TodoController
    - `seeded` controller starts with MILK loaded and confirmed
"""

import pytest

from todo_sync.core.domain_types import TodoItem
from todo_sync.services.todo_controller import TodoController

from tests.services.fake_sync_client import FakeSyncClient

MILK = TodoItem(1, "Buy milk")


@pytest.fixture
def fake_client():
    return FakeSyncClient()


@pytest.fixture
def controller(fake_client):
    return TodoController(fake_client)


@pytest.fixture
async def seeded():
    """Controller whose remote and local store both hold MILK."""
    client = FakeSyncClient([MILK])
    controller = TodoController(client)
    await controller.load()
    client.calls.clear()
    return controller, client
