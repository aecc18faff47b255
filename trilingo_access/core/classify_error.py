"""Error Classifier - maps a terminal attempt outcome to exactly one AccessError.

Invariants:
    - 401/403 on the final channel -> PermissionDeniedError
    - Any 5xx (500/502/503/504 and the rest) -> TransientError, status code in the message
    - TIMEOUT / ABORTED transport failure -> RequestTimeoutError
    - Other 4xx -> ResponseValidationError with the backend message, else a per-status fallback
    - No response (DNS, refused, network) -> UnknownNetworkError with a connectivity hint
    - Pure function: same outcome + descriptor -> same error kind and message

Design Decisions:
    - Consulted by AccessClient only; resource methods never branch on status codes
    - Pure-public endpoints keep the backend's wording on 401 (it is the login answer)
"""

from typing import Any

from trilingo_access.core.domain_types import TransportFailure
from trilingo_access.core.errors import (
    AccessError,
    ErrorContext,
    PermissionDeniedError,
    RequestTimeoutError,
    ResponseValidationError,
    TransientError,
    UnknownNetworkError,
)
from trilingo_access.core.request_types import AttemptOutcome, RequestDescriptor

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password. Please try again."
TIMEOUT_MESSAGE = (
    "Request timeout. The server took too long to respond. Please try again."
)
CONNECTIVITY_MESSAGE = "Network error. Please check your internet connection."

_MAX_TEXT_MESSAGE = 300

_TRANSIENT_MESSAGES = {
    500: "Internal server error (500). Please try again later.",
    502: "Bad gateway (502). The server is not responding correctly.",
    503: "Service temporarily unavailable (503). Please try again later.",
    504: (
        "Backend connection failed: Server responded with error: 504. "
        "Please check if the backend server is running and accessible."
    ),
}

_VALIDATION_FALLBACKS = {
    400: "The request was invalid.",
    404: "The requested resource was not found.",
    405: "This operation is not supported by the server.",
    409: "The request conflicts with the current state of the resource.",
    413: "The uploaded content is too large.",
    415: "The uploaded content type is not supported.",
    422: "The submitted data could not be processed.",
    429: "Too many requests. Please wait a moment and try again.",
}

_CONNECTIVITY_HINTS = {
    TransportFailure.DNS: (
        "Backend server could not be found. Check the configured API URL "
        "and your internet connection."
    ),
    TransportFailure.CONNECT: (
        "Backend server is not running or not accessible. "
        "Please check your internet connection."
    ),
}


def extract_backend_message(payload: Any) -> str | None:
    """Pull a human-readable message out of a backend error body."""
    if isinstance(payload, str):
        text = payload.strip()
        # HTML error pages (proxies, CDN) are not messages
        if not text or text.startswith("<") or len(text) > _MAX_TEXT_MESSAGE:
            return None
        return text
    if not isinstance(payload, dict):
        return None
    message = payload.get("message") or payload.get("Message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    errors = payload.get("errors")
    if isinstance(errors, list):
        joined = "; ".join(str(e) for e in errors if e)
        if joined:
            return joined
    if isinstance(errors, dict):
        # ASP.NET ProblemDetails: {"field": ["msg", ...]}
        parts = [
            str(m) for msgs in errors.values()
            for m in (msgs if isinstance(msgs, list) else [msgs]) if m
        ]
        if parts:
            return "; ".join(parts)
    title = payload.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return None


def build_context(
    outcome: AttemptOutcome, descriptor: RequestDescriptor,
) -> ErrorContext:
    """Logging context for a classified error. Never includes credentials."""
    debug_info: dict[str, Any] = {}
    if outcome.failure is not None:
        debug_info["transport_failure"] = outcome.failure.value
    if outcome.detail:
        debug_info["detail"] = outcome.detail
    return ErrorContext(
        endpoint=descriptor.path,
        method=descriptor.method.value,
        channel=outcome.channel.value,
        status_code=outcome.status_code,
        attempts=outcome.attempts,
        debug_info=debug_info or None,
    )


def classify_outcome(
    outcome: AttemptOutcome, descriptor: RequestDescriptor,
) -> AccessError:
    """Normalize a terminal, non-successful outcome."""
    if outcome.ok:
        raise ValueError("cannot classify a successful outcome")
    context = build_context(outcome, descriptor)

    if not outcome.responded:
        return _classify_transport_failure(outcome.failure, context)

    status = outcome.status_code
    backend_message = extract_backend_message(outcome.payload)

    if outcome.is_permission_denied:
        return PermissionDeniedError(
            _permission_message(status, descriptor, backend_message), context,
        )
    if status >= 500:
        return TransientError(
            _TRANSIENT_MESSAGES.get(
                status, f"Server responded with error: {status}. Please try again later.",
            ),
            context,
        )
    if 400 <= status < 500:
        return ResponseValidationError(
            backend_message or _VALIDATION_FALLBACKS.get(
                status, f"Request failed with status {status}.",
            ),
            context,
        )
    return UnknownNetworkError(
        f"Unexpected response from server (status {status}).", context,
    )


def _classify_transport_failure(
    failure: TransportFailure | None, context: ErrorContext,
) -> AccessError:
    if failure in (TransportFailure.TIMEOUT, TransportFailure.ABORTED):
        return RequestTimeoutError(TIMEOUT_MESSAGE, context)
    return UnknownNetworkError(
        _CONNECTIVITY_HINTS.get(failure, CONNECTIVITY_MESSAGE)
        if failure is not None else CONNECTIVITY_MESSAGE,
        context,
    )


def _permission_message(
    status: int, descriptor: RequestDescriptor, backend_message: str | None,
) -> str:
    if descriptor.pure_public:
        return backend_message or INVALID_CREDENTIALS_MESSAGE
    if status == 401:
        return "Authentication failed. Please login again."
    return f"You do not have permission to access {descriptor.path}."
