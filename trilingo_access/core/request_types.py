"""Request Types - immutable descriptions of channels, requests and attempt outcomes.

Invariants:
    - ChannelConfig, RequestDescriptor and AttemptOutcome are frozen: never mutated in flight
    - A RequestDescriptor marked pure_public never escalates to the authenticated channel
    - AttemptOutcome has either a status_code or a transport failure, never both
    - Outcomes are ephemeral: nothing here is persisted

Design Decisions:
    - Descriptor factories (read/write) own the defaults so call sites stay one-liners
    - pure_public is derived from the path for writes unless given explicitly
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from trilingo_access.core.domain_types import (
    ChannelName, HttpMethod, TransportFailure,
)

# Endpoints whose 401 is a business answer ("invalid credentials"), not an escalation signal
PURE_PUBLIC_PATHS = ("/auth/login", "/auth/register")

_PERMISSION_STATUSES = frozenset({401, 403})


def is_pure_public_path(path: str) -> bool:
    """True for login/registration endpoints."""
    return any(p in path for p in PURE_PUBLIC_PATHS)


@dataclass(frozen=True)
class ChannelConfig:
    """Fixed (base address, auth mode, timeout, headers) used to send a request."""
    name: ChannelName
    base_url: str
    timeout_seconds: float
    default_headers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    @property
    def authenticated(self) -> bool:
        return self.name is ChannelName.AUTHENTICATED

    def url_for(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")


@dataclass(frozen=True)
class UploadFile:
    """A single multipart file part."""
    field_name: str
    filename: str
    content: bytes
    content_type: str


@dataclass(frozen=True)
class RequestDescriptor:
    """What to send and how the dispatcher may route it."""
    method: HttpMethod
    path: str
    body: Any = None
    params: Mapping[str, Any] | None = None
    files: tuple[UploadFile, ...] = ()
    pure_public: bool = False
    public_first: bool = True
    idempotency_key: str | None = None
    invalidates_credential_on_401: bool = True

    @classmethod
    def read(
        cls,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        public_first: bool = True,
        invalidates_credential_on_401: bool = True,
    ) -> "RequestDescriptor":
        return cls(
            HttpMethod.GET, path, params=params, public_first=public_first,
            invalidates_credential_on_401=invalidates_credential_on_401,
        )

    @classmethod
    def write(
        cls,
        method: HttpMethod,
        path: str,
        body: Any = None,
        *,
        pure_public: bool | None = None,
        public_first: bool = False,
        files: tuple[UploadFile, ...] = (),
        invalidates_credential_on_401: bool = True,
    ) -> "RequestDescriptor":
        if method.is_read:
            raise ValueError("write descriptors require a mutating method")
        return cls(
            method, path, body=body, files=files,
            pure_public=(
                is_pure_public_path(path) if pure_public is None else pure_public
            ),
            public_first=public_first,
            invalidates_credential_on_401=invalidates_credential_on_401,
        )

    @property
    def is_read(self) -> bool:
        return self.method.is_read

    @property
    def is_upload(self) -> bool:
        return bool(self.files)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of sending one descriptor over one channel (possibly after retries)."""
    channel: ChannelName
    status_code: int | None = None
    payload: Any = None
    failure: TransportFailure | None = None
    detail: str | None = None
    attempts: int = 1

    @property
    def responded(self) -> bool:
        return self.status_code is not None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300

    @property
    def is_permission_denied(self) -> bool:
        return self.status_code in _PERMISSION_STATUSES
