"""Domain Types - rich types that replace bare primitives across the access layer.

Invariants:
    - Credential wraps the raw bearer token string - never log or persist it elsewhere
    - All valid states encoded as Enums - no raw string matching on error messages
    - ErrorKind is the closed taxonomy callers switch on

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON log fields without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity / Value Types ──────────────────────────────────────

Credential = NewType("Credential", str)
Endpoint = NewType("Endpoint", str)


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """HTTP verbs the access layer issues. GET is the only read verb."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def is_read(self) -> bool:
        return self is HttpMethod.GET


class ChannelName(str, Enum):
    """The two credential channels that exist for the access layer's lifetime."""
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


class DispatchState(str, Enum):
    """Per-call dispatcher state. DONE is terminal."""
    TRY_PUBLIC = "try_public"
    TRY_AUTHENTICATED = "try_authenticated"
    DONE = "done"


class TransportFailure(str, Enum):
    """Why an attempt produced no HTTP response."""
    TIMEOUT = "timeout"
    ABORTED = "aborted"
    CONNECT = "connect"
    DNS = "dns"
    NETWORK = "network"


class OutcomeKind(str, Enum):
    """What the retry engine does next with an attempt outcome."""
    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


class ErrorKind(str, Enum):
    """The stable error taxonomy exposed to every caller."""
    PERMISSION_DENIED = "permission_denied"
    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class UserAction(str, Enum):
    """What a UI layer should offer for each error kind."""
    SHOW_ACCESS_RESTRICTED = "show_access_restricted"
    OFFER_RETRY = "offer_retry"
    SHOW_MESSAGE = "show_message"
    SHOW_CONNECTIVITY_HELP = "show_connectivity_help"
