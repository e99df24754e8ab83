"""Health Probe: liveness endpoint for the reference store.

Invariants:
    - GET /health always returns 200 if the process is up
"""

from fastapi import APIRouter, Request, status

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe with the current item count."""
    return {
        "status": "healthy",
        "service": "todo-sync-store",
        "todos": len(request.app.state.todo_backend.list_all()),
    }
