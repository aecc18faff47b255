"""Error Hierarchy - typed, categorized exceptions for every access-layer failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every AccessError carries exactly one ErrorKind, attached at classification time
    - No transport internals leaked in message; raw detail lives in context.debug_info
    - to_response() produces the same envelope shape for every error

Design Decisions:
    - Single hierarchy with TrilingoError base: callers may catch one type for "any failure"
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Cancellation and storage failures sit outside AccessError: they are not
      backend outcomes, so they never appear in the ErrorKind taxonomy
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from trilingo_access.core.domain_types import ErrorKind, UserAction


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    NETWORK = "network"
    CANCELLED = "cancelled"
    STORAGE = "storage"
    CONFIGURATION = "configuration"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    endpoint: str | None = None
    method: str | None = None
    channel: str | None = None
    status_code: int | None = None
    attempts: int | None = None
    debug_info: dict[str, Any] | None = None


class TrilingoError(Exception):
    """Base exception for all Trilingo access-layer errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to a standardized error envelope (UI state, logs)."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "endpoint": self.context.endpoint,
                    "method": self.context.method,
                    "channel": self.context.channel,
                    "status_code": self.context.status_code,
                    "attempts": self.context.attempts,
                },
            }
        }


# ─── Classified Access Errors ───────────────────────────────────

class AccessError(TrilingoError):
    """A terminal backend/transport outcome, normalized to one ErrorKind."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    user_action: UserAction = UserAction.SHOW_CONNECTIVITY_HELP

    @property
    def status_code(self) -> int | None:
        return self.context.status_code

    @property
    def recoverable(self) -> bool:
        """True when offering the user a retry makes sense."""
        return self.user_action is UserAction.OFFER_RETRY

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["kind"] = self.kind.value
        response["error"]["user_action"] = self.user_action.value
        response["error"]["recoverable"] = self.recoverable
        return response


class PermissionDeniedError(AccessError):
    """401/403 on the final channel attempted (or invalid login credentials)."""
    kind = ErrorKind.PERMISSION_DENIED
    user_action = UserAction.SHOW_ACCESS_RESTRICTED

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context,
        )


class TransientError(AccessError):
    """5xx response after the retry budget was spent."""
    kind = ErrorKind.TRANSIENT
    user_action = UserAction.OFFER_RETRY

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSIENT_SERVER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context,
        )


class RequestTimeoutError(AccessError):
    """Connection/read timeout or aborted request."""
    kind = ErrorKind.TIMEOUT
    user_action = UserAction.OFFER_RETRY

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context,
        )


class ResponseValidationError(AccessError):
    """4xx other than 401/403 - carries the backend's message when present."""
    kind = ErrorKind.VALIDATION
    user_action = UserAction.SHOW_MESSAGE

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )


class UnknownNetworkError(AccessError):
    """No response at all (DNS, refused connection) or an unexpected status."""
    kind = ErrorKind.UNKNOWN
    user_action = UserAction.SHOW_CONNECTIVITY_HELP

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "NETWORK_ERROR", ErrorCategory.NETWORK,
            ErrorSeverity.ERROR, context,
        )


# ─── Non-classified Errors ──────────────────────────────────────

class RequestCancelledError(TrilingoError):
    """Caller set the cancel signal while an attempt or backoff was pending."""
    def __init__(self, endpoint: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.endpoint = ctx.endpoint or endpoint
        super().__init__(
            f"Request to {endpoint} was cancelled",
            "REQUEST_CANCELLED", ErrorCategory.CANCELLED,
            ErrorSeverity.INFO, ctx,
        )


class LocalStorageError(TrilingoError):
    """Local storage operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Local storage {operation} failed: {message}",
            "LOCAL_STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation


class ConfigurationError(TrilingoError):
    """Settings cannot satisfy the requested operation."""
    def __init__(self, message: str, setting: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
        self.setting = setting
