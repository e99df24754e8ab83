"""Reference Store API: FastAPI app serving /todos from memory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TodoSyncError → structured JSON responses
    - Each create_app() call gets its own TodoBackend on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - Backend attached at construction, not in lifespan: ASGI test transports
      do not run lifespan events
    - Module-level `app` for `uvicorn todo_sync.api.main:app --port 8080`,
      the address the client's default api_base_url points at
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_sync.api.error_handlers import register_error_handlers
from todo_sync.api.routes import health, todos
from todo_sync.api.todo_backend import TodoBackend
from todo_sync.config import get_settings
from todo_sync.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Todo store started")
    yield
    logger.info("Todo store shutting down")


def create_app(backend: TodoBackend | None = None) -> FastAPI:
    app = FastAPI(title="todo-sync reference store", version="1.0.0", lifespan=lifespan)
    app.state.todo_backend = backend or TodoBackend()
    app.include_router(health.router)
    app.include_router(todos.router)
    register_error_handlers(app)
    return app


app = create_app()
