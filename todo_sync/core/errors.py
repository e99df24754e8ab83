"""Error Hierarchy: typed, categorized exceptions for every todo-sync failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Remote failures (TransportError, RemoteError) are recoverable and reported
    - Store precondition failures (NotFoundError, DuplicateIdError) are programming
      errors and are never caught by the controller
    - to_response() produces the REST envelope served by the reference store

Design Decisions:
    - Single hierarchy with TodoSyncError base: the API's global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    item_id: Any = None
    intent: str | None = None
    operation: str | None = None
    status_code: int | None = None
    debug_info: dict[str, Any] | None = None


class TodoSyncError(Exception):
    """Base exception for all todo-sync errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "item_id": self.context.item_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Local Store Errors (programming errors) ────────────────────

class NotFoundError(TodoSyncError):
    """No item with the given id."""
    def __init__(
        self, resource_type: str, resource_id: Any, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.item_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_id = resource_id


class DuplicateIdError(TodoSyncError):
    """An item with the given id is already present."""
    def __init__(self, resource_id: Any, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.item_id = resource_id
        super().__init__(
            f"Todo '{resource_id}' already exists",
            "DUPLICATE_ID", ErrorCategory.CONFLICT,
            ErrorSeverity.CRITICAL, ctx, 409,
        )
        self.resource_id = resource_id


# ─── Remote Errors (recoverable) ────────────────────────────────

class TransportError(TodoSyncError):
    """Remote store unreachable or timed out."""
    def __init__(
        self, message: str, timeout: bool = False, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Transport failure: {message}",
            "TRANSPORT_ERROR",
            ErrorCategory.TIMEOUT if timeout else ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 503,
        )
        self.timeout = timeout


class RemoteError(TodoSyncError):
    """Remote store answered with a non-success response."""
    def __init__(
        self, message: str, status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.status_code = status_code
        super().__init__(
            f"Remote store error ({status_code}): {message}",
            "REMOTE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.status_code = status_code
