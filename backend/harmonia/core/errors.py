"""Error Hierarchy — typed, categorized exceptions for all Harmonia failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the same {status, data} envelope every handler sends
    - Startup and runtime faults never reach a response; they are process-level

Design Decisions:
    - Single hierarchy with HarmoniaError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - No retry metadata: nothing in the core retries, retry belongs to the datastore driver
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
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    STARTUP = "startup"
    RUNTIME = "runtime"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    stage: str | None = None
    resource: str | None = None
    debug_info: dict[str, Any] | None = None


class HarmoniaError(Exception):
    """Base exception for all Harmonia errors."""

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

    def detail(self) -> Any:
        """Payload placed under `data` in the response envelope."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }

    def to_response(self) -> dict:
        """Convert to the standard {status, data} envelope."""
        return {"status": self.http_status, "data": self.detail()}


# ─── Request Errors (4xx) ───────────────────────────────────────

class ValidationError(HarmoniaError):
    """Client input failed a schema. Details are field-level entries."""
    def __init__(
        self, details: list[dict], message: str = "Invalid request data",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.details = details

    def detail(self) -> Any:
        return self.details


class ResourceNotFoundError(HarmoniaError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class UnauthorizedError(HarmoniaError):
    """Request lacks valid credentials."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class QueryError(HarmoniaError):
    """A datastore read failed. Always chained to the underlying cause."""
    def __init__(
        self, message: str, cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "QUERY_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.cause = cause


class DatastoreQueryError(HarmoniaError):
    """Raised by the datastore when a count or fetch fails."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class DatastoreConnectionError(HarmoniaError):
    """A configured database could not be reached."""
    def __init__(self, name: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database '{name}' connection failed: {message}",
            "DATABASE_UNREACHABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.name = name


class ResponseAlreadySentError(HarmoniaError):
    """send() called twice on one request — a programming error."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Response already sent for this request",
            "HEADERS_ALREADY_SENT", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Process Faults (never rendered as responses) ───────────────

class ConfigurationError(HarmoniaError):
    """Environment snapshot is unusable (bad locale, missing TLS material)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class TransportError(ConfigurationError):
    """Transport cannot be bound as configured."""


class ValidatorNotConfiguredError(HarmoniaError):
    """Validation attempted before a locale catalog was bound."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Validator used before set_locale()/sync_settings()",
            "VALIDATOR_NOT_CONFIGURED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class InvalidTransitionError(HarmoniaError):
    """Lifecycle asked to move out of order."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Illegal lifecycle transition {current} -> {target}",
            "INVALID_TRANSITION", ErrorCategory.STARTUP,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.current = current
        self.target = target


class StartupFault(HarmoniaError):
    """Any failure during the sequential bootstrap. Fatal."""
    def __init__(
        self, stage: str, message: str, cause: BaseException | None = None,
    ):
        super().__init__(
            f"Startup failed during {stage}: {message}",
            "STARTUP_FAULT", ErrorCategory.STARTUP,
            ErrorSeverity.CRITICAL, ErrorContext(stage=stage), 500,
        )
        self.stage = stage
        self.cause = cause


class RuntimeFault(HarmoniaError):
    """Uncaught fault after SERVING, outside any request's error boundary."""
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(
            message, "RUNTIME_FAULT", ErrorCategory.RUNTIME,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.cause = cause
