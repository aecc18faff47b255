"""HTTP Channel - sends one attempt of a request over one credential channel.

Invariants:
    - Exactly one HTTP exchange per send(); retries belong to RetryEngine
    - Authenticated channel reads the credential on every send (refreshes picked up)
    - Public channel never sends an Authorization header
    - Uploads omit Content-Type so httpx can set the multipart boundary
    - httpx exceptions never escape: they become AttemptOutcome.failure

Design Decisions:
    - Both channels share one httpx.AsyncClient: one connection pool per access layer
    - Per-attempt timeout via httpx.Timeout, fixed per channel (override for uploads/diagnostics)
    - DNS failures detected from the socket.gaierror in the exception chain, not message text
"""

import logging
import socket
from typing import Any

import httpx

from trilingo_access.core.boundary_protocols import CredentialStore
from trilingo_access.core.domain_types import TransportFailure
from trilingo_access.core.request_types import (
    AttemptOutcome, ChannelConfig, RequestDescriptor,
)

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


class HttpChannel:
    """One of the two fixed channels (public / authenticated)."""

    def __init__(
        self,
        config: ChannelConfig,
        client: httpx.AsyncClient,
        credential_store: CredentialStore | None = None,
    ):
        if config.authenticated and credential_store is None:
            raise ValueError("authenticated channel requires a credential store")
        self.config = config
        self._client = client
        self._credentials = credential_store

    @property
    def name(self):
        return self.config.name

    async def send(
        self,
        descriptor: RequestDescriptor,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> AttemptOutcome:
        """Send one attempt. Never raises for transport or HTTP failures."""
        url = (
            base_url.rstrip("/") + "/" + descriptor.path.lstrip("/")
            if base_url else self.config.url_for(descriptor.path)
        )
        headers = await self._build_headers(descriptor)
        timeout = httpx.Timeout(timeout_seconds or self.config.timeout_seconds)

        try:
            response = await self._client.request(
                descriptor.method.value,
                url,
                headers=headers,
                timeout=timeout,
                **_body_kwargs(descriptor),
            )
        except httpx.TimeoutException as e:
            return self._failure(TransportFailure.TIMEOUT, e, descriptor)
        except httpx.ConnectError as e:
            failure = (
                TransportFailure.DNS if _caused_by(e, socket.gaierror)
                else TransportFailure.CONNECT
            )
            return self._failure(failure, e, descriptor)
        except (httpx.ReadError, httpx.WriteError, httpx.CloseError) as e:
            return self._failure(TransportFailure.ABORTED, e, descriptor)
        except httpx.TransportError as e:
            return self._failure(TransportFailure.NETWORK, e, descriptor)

        logger.debug(
            f"{descriptor.method.value} {descriptor.path} -> {response.status_code}",
            extra={
                "endpoint": descriptor.path,
                "method": descriptor.method.value,
                "channel": self.config.name.value,
                "status_code": response.status_code,
            },
        )
        return AttemptOutcome(
            channel=self.config.name,
            status_code=response.status_code,
            payload=_parse_payload(response),
        )

    async def _build_headers(self, descriptor: RequestDescriptor) -> dict[str, str]:
        headers = dict(self.config.default_headers)
        if self.config.authenticated and self._credentials is not None:
            token = await self._credentials.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        if descriptor.is_upload:
            headers = {
                k: v for k, v in headers.items() if k.lower() != "content-type"
            }
        if descriptor.idempotency_key:
            headers[IDEMPOTENCY_HEADER] = descriptor.idempotency_key
        return headers

    def _failure(
        self, failure: TransportFailure, error: Exception, descriptor: RequestDescriptor,
    ) -> AttemptOutcome:
        logger.debug(
            f"{descriptor.method.value} {descriptor.path} failed: {failure.value}",
            extra={
                "endpoint": descriptor.path,
                "method": descriptor.method.value,
                "channel": self.config.name.value,
            },
        )
        return AttemptOutcome(
            channel=self.config.name,
            failure=failure,
            detail=f"{type(error).__name__}: {error}",
        )


def _body_kwargs(descriptor: RequestDescriptor) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if descriptor.params:
        kwargs["params"] = dict(descriptor.params)
    if descriptor.is_upload:
        kwargs["files"] = [
            (f.field_name, (f.filename, f.content, f.content_type))
            for f in descriptor.files
        ]
        if isinstance(descriptor.body, dict):
            kwargs["data"] = descriptor.body
    elif descriptor.body is not None:
        kwargs["json"] = descriptor.body
    return kwargs


def _parse_payload(response: httpx.Response) -> Any:
    """JSON when possible, raw text otherwise, None for an empty body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _caused_by(error: BaseException, exc_type: type[BaseException]) -> bool:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, exc_type):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False
