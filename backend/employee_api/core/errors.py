"""Error Hierarchy — typed, categorized exceptions for every facade failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Not-found is 404; upstream failures are 5xx (the facade itself did nothing wrong)
    - to_response() produces the REST error envelope
    - No upstream bodies leaked in user-facing messages (kept on the exception only)

Design Decisions:
    - Single hierarchy with EmployeeApiError base: one FastAPI handler catches all
    - UpstreamError subclasses carry the raw material (body, envelope, last_error)
      so callers can inspect the underlying kind without string matching
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


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
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    employee_id: str | None = None
    attempt: int | None = None
    status_code: int | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class EmployeeApiError(Exception):
    """Base exception for all facade errors."""

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
                    "operation": self.context.operation,
                    "employee_id": self.context.employee_id,
                    "attempt": self.context.attempt,
                    "status_code": self.context.status_code,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(EmployeeApiError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


# ─── Upstream Errors (500-level) ────────────────────────────────

class UpstreamError(EmployeeApiError):
    """Upstream employee service call failed."""
    def __init__(
        self,
        message: str,
        code: str = "UPSTREAM_ERROR",
        category: ErrorCategory = ErrorCategory.EXTERNAL_API,
        context: ErrorContext | None = None,
        http_status: int = 502,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, context, http_status,
        )


class UpstreamHttpError(UpstreamError):
    """Upstream answered with an HTTP error status (other than a retried 429)."""
    def __init__(
        self, status_code: int, body: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.status_code = status_code
        super().__init__(
            f"Upstream returned HTTP {status_code}",
            "UPSTREAM_HTTP_ERROR", context=ctx,
        )
        self.status_code = status_code
        self.body = body


class UpstreamLogicalError(UpstreamError):
    """Upstream envelope reported failure despite a 2xx status."""
    def __init__(self, envelope: Any, context: ErrorContext | None = None):
        detail = getattr(envelope, "error", None) or "no error detail"
        super().__init__(
            f"Upstream failed to process request: {detail}",
            "UPSTREAM_LOGICAL_ERROR", context=context,
        )
        self.envelope = envelope


class UpstreamDecodeError(UpstreamError):
    """Upstream response body was not a usable envelope."""
    def __init__(self, message: str, body: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed upstream response: {message}",
            "UPSTREAM_DECODE_ERROR", context=context,
        )
        self.body = body


class UpstreamUnavailable(UpstreamError):
    """Upstream kept rate-limiting until the retry budget ran out."""
    def __init__(
        self, attempts: int, last_error: UpstreamError, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Upstream rate limit persisted after {attempts} attempts",
            "UPSTREAM_UNAVAILABLE", context=context, http_status=503,
        )
        self.attempts = attempts
        self.last_error = last_error


class UpstreamConnectionError(UpstreamError):
    """Upstream could not be reached or the connection broke mid-response."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream connection failed: {message}",
            "UPSTREAM_CONNECTION_ERROR", context=context, http_status=503,
        )


class UpstreamTimeoutError(UpstreamError):
    """Upstream call exceeded its deadline."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream call timed out: {detail}",
            "UPSTREAM_TIMEOUT", ErrorCategory.TIMEOUT,
            context=context, http_status=504,
        )
