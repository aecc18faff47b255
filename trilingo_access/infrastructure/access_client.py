"""Access Client - dual-channel dispatcher driving the pure dispatch state machine.

Invariants:
    - One logical call = one walk TRY_PUBLIC/TRY_AUTHENTICATED -> DONE (core/dispatch_state.py)
    - Each visited channel runs through RetryEngine once (reads: read policy, writes: write policy)
    - Terminal failures are classified once (core/classify_error.py) and raised as AccessError
    - A terminal 401 from the authenticated channel clears the stored credential (once)
    - Writes get one Idempotency-Key before the first attempt, reused for every retry/escalation
    - Uploads bypass public-first logic and never target a CDN-fronted origin

Design Decisions:
    - Explicitly constructed (no module singleton): tests build isolated instances
    - Both channels share one httpx.AsyncClient; transport injectable for tests
    - Channel selection is pure; this class only performs IO and logging around it
"""

import asyncio
import dataclasses
import functools
import logging
import uuid
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from trilingo_access.config import Settings
from trilingo_access.core.boundary_protocols import CredentialStore
from trilingo_access.core.classify_error import classify_outcome
from trilingo_access.core.dispatch_state import channel_for, initial_state, next_state
from trilingo_access.core.domain_types import (
    ChannelName, DispatchState, ErrorKind, HttpMethod,
)
from trilingo_access.core.errors import (
    AccessError, ConfigurationError, LocalStorageError,
)
from trilingo_access.core.request_types import (
    AttemptOutcome, ChannelConfig, RequestDescriptor, UploadFile,
)
from trilingo_access.core.retry_policy import RetryPolicy
from trilingo_access.infrastructure.http_channel import HttpChannel
from trilingo_access.infrastructure.retry_engine import RetryEngine

logger = logging.getLogger(__name__)

# Business outcomes, not faults: logged at warning
_EXPECTED_KINDS = frozenset({ErrorKind.PERMISSION_DENIED, ErrorKind.VALIDATION})


def build_channel_configs(settings: Settings) -> tuple[ChannelConfig, ChannelConfig]:
    """The two fixed channels: (public, authenticated)."""
    headers = MappingProxyType({
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": settings.user_agent,
    })
    public = ChannelConfig(
        ChannelName.PUBLIC, settings.api_base_url,
        settings.request_timeout_seconds, headers,
    )
    authenticated = ChannelConfig(
        ChannelName.AUTHENTICATED, settings.api_base_url,
        settings.request_timeout_seconds, headers,
    )
    return public, authenticated


def resolve_upload_base_url(settings: Settings) -> str:
    """Direct backend origin for uploads (the CDN rejects write/upload methods)."""
    if not settings.is_cdn_url(settings.api_base_url):
        return settings.api_base_url
    if settings.direct_api_base_url and not settings.is_cdn_url(settings.direct_api_base_url):
        return settings.direct_api_base_url
    raise ConfigurationError(
        "Uploads need a direct backend URL: the configured API URL is CDN-fronted. "
        "Set TRILINGO_DIRECT_API_BASE_URL.",
        "direct_api_base_url",
    )


class AccessClient:
    """Mediates every call between resource methods and the backend."""

    def __init__(
        self,
        settings: Settings,
        credential_store: CredentialStore,
        *,
        http_client: httpx.AsyncClient | None = None,
        retry_engine: RetryEngine | None = None,
    ):
        self.settings = settings
        self.credentials = credential_store
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(follow_redirects=True)
        self._retry = retry_engine or RetryEngine()
        public, authenticated = build_channel_configs(settings)
        self._channels = {
            ChannelName.PUBLIC: HttpChannel(public, self._http),
            ChannelName.AUTHENTICATED: HttpChannel(
                authenticated, self._http, credential_store,
            ),
        }

    async def __aenter__(self) -> "AccessClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def channel(self, name: ChannelName) -> HttpChannel:
        return self._channels[name]

    # ─── Generic verbs ──────────────────────────────────────────

    async def get(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        public_first: bool = True,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self.request(
            RequestDescriptor.read(path, params=params, public_first=public_first),
            cancel=cancel,
        )

    async def post(
        self,
        path: str,
        body: Any = None,
        *,
        pure_public: bool | None = None,
        public_first: bool = False,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self.request(
            RequestDescriptor.write(
                HttpMethod.POST, path, body,
                pure_public=pure_public, public_first=public_first,
            ),
            cancel=cancel,
        )

    async def put(
        self, path: str, body: Any = None, *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self.request(
            RequestDescriptor.write(HttpMethod.PUT, path, body), cancel=cancel,
        )

    async def delete(
        self, path: str, *, cancel: asyncio.Event | None = None,
    ) -> Any:
        return await self.request(
            RequestDescriptor.write(HttpMethod.DELETE, path), cancel=cancel,
        )

    # ─── Dispatch ───────────────────────────────────────────────

    async def request(
        self,
        descriptor: RequestDescriptor,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        """Dispatch one logical call. Returns the success payload or raises AccessError."""
        descriptor = self._with_idempotency_key(descriptor)
        policy = self._policy_for(descriptor)

        state = initial_state(descriptor)
        while True:
            channel = self._channels[channel_for(state)]
            outcome = await self._retry.execute(
                functools.partial(channel.send, descriptor),
                policy,
                endpoint=descriptor.path,
                cancel=cancel,
            )
            previous, state = state, next_state(state, descriptor, outcome)
            if state is DispatchState.DONE:
                break
            logger.info(
                f"{descriptor.method.value} {descriptor.path}: "
                f"{outcome.status_code} on {previous.value}, "
                f"escalating to authenticated channel",
                extra={
                    "endpoint": descriptor.path,
                    "method": descriptor.method.value,
                    "channel": outcome.channel.value,
                    "status_code": outcome.status_code,
                },
            )

        if outcome.ok:
            return outcome.payload
        await self._after_terminal_failure(descriptor, outcome)
        raise self._classify(descriptor, outcome)

    async def upload(
        self,
        path: str,
        file: UploadFile,
        *,
        fields: Mapping[str, str] | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        """Multipart upload on the authenticated channel to the direct backend origin."""
        base_url = resolve_upload_base_url(self.settings)
        descriptor = self._with_idempotency_key(RequestDescriptor.write(
            HttpMethod.POST, path, dict(fields) if fields else None,
            pure_public=False, files=(file,),
        ))
        channel = self._channels[ChannelName.AUTHENTICATED]
        logger.info(
            f"Uploading {file.filename} to {base_url}{path}",
            extra={"endpoint": path, "url": base_url},
        )
        outcome = await self._retry.execute(
            lambda: channel.send(
                descriptor,
                base_url=base_url,
                timeout_seconds=self.settings.upload_timeout_seconds,
            ),
            self.settings.upload_policy,
            endpoint=path,
            cancel=cancel,
        )
        if outcome.ok:
            return outcome.payload
        await self._after_terminal_failure(descriptor, outcome)
        raise self._classify(descriptor, outcome)

    # ─── Helpers ────────────────────────────────────────────────

    def _policy_for(self, descriptor: RequestDescriptor) -> RetryPolicy:
        return (
            self.settings.read_policy if descriptor.is_read
            else self.settings.write_policy
        )

    def _with_idempotency_key(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        if (
            descriptor.is_read
            or descriptor.idempotency_key
            or not self.settings.idempotency_keys_enabled
        ):
            return descriptor
        return dataclasses.replace(descriptor, idempotency_key=str(uuid.uuid4()))

    async def _after_terminal_failure(
        self, descriptor: RequestDescriptor, outcome: AttemptOutcome,
    ) -> None:
        """Drop a rejected credential: 401 from the authenticated channel."""
        if (
            outcome.status_code == 401
            and outcome.channel is ChannelName.AUTHENTICATED
            and descriptor.invalidates_credential_on_401
        ):
            logger.warning(
                f"Authenticated channel rejected credential for {descriptor.path}; clearing it",
                extra={"endpoint": descriptor.path, "status_code": 401},
            )
            try:
                await self.credentials.clear()
            except LocalStorageError as e:
                logger.error(f"Could not clear rejected credential: {e}")

    def _classify(
        self, descriptor: RequestDescriptor, outcome: AttemptOutcome,
    ) -> AccessError:
        error = classify_outcome(outcome, descriptor)
        log = logger.warning if error.kind in _EXPECTED_KINDS else logger.error
        log(
            f"{descriptor.method.value} {descriptor.path} failed: {error.message}",
            extra={
                "endpoint": descriptor.path,
                "method": descriptor.method.value,
                "channel": outcome.channel.value,
                "status_code": outcome.status_code,
                "attempt": outcome.attempts,
                "error_kind": error.kind.value,
                "error_code": error.code,
            },
        )
        return error
