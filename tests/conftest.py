"""Root conftest: shared test configuration."""

import os

import pytest

from todo_sync.config import get_settings

# Tests never talk to a real remote store
os.environ.setdefault("API_BASE_URL", "http://test")
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
