"""Error Handlers: every failure of the reference store leaves in one JSON envelope.

Invariants:
    - Error bodies are always {"error": {code, message, ...}}; HttpSyncClient
      surfaces error.message as the RemoteError text
    - Unknown todo ids → 404 NOT_FOUND with the id in error.context.item_id
    - Rejected /todos bodies or ids (blank or oversized text, wrong types) →
      400 VALIDATION_ERROR; the message names each offending field
    - Anything unexpected → 500 INTERNAL_ERROR; details stay in the log
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_sync.core.errors import (
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    TodoSyncError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoSyncError, _store_error)
    app.add_exception_handler(RequestValidationError, _rejected_request)
    app.add_exception_handler(Exception, _unexpected_error)


async def _store_error(request: Request, exc: TodoSyncError) -> JSONResponse:
    _log_rejection(request, exc)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _rejected_request(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    error = TodoSyncError(
        "Invalid todo request: "
        + "; ".join(f"{f['field']}: {f['message']}" for f in fields),
        "VALIDATION_ERROR",
        ErrorCategory.VALIDATION,
        ErrorSeverity.ERROR,
        ErrorContext(
            item_id=request.path_params.get("todo_id"),
            operation=f"{request.method} {request.url.path}",
        ),
        http_status=status.HTTP_400_BAD_REQUEST,
    )
    _log_rejection(request, error)
    body = error.to_response()
    body["error"]["details"] = fields
    return JSONResponse(status_code=error.http_status, content=body)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "The todo store failed to handle the request",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _log_rejection(request: Request, error: TodoSyncError) -> None:
    logger.warning(
        f"Rejected {request.method} {request.url.path}: {error.message}",
        extra={
            "error_code": error.code,
            "item_id": error.context.item_id,
            "method": request.method,
            "path": request.url.path,
        },
    )
