"""Boundary Protocols - contracts between the access layer's logic and its IO.

Invariants:
    - AccessClient depends on these Protocols, never on concrete storage or transport
    - CredentialStore.get never raises: storage failure reads as "no credential"
    - Only the auth flows call set/clear; ordinary requests only call get

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async methods: implementations do IO
"""

from typing import Awaitable, Callable, Protocol

from trilingo_access.core.domain_types import Credential


class CredentialStore(Protocol):
    """Single bearer token, durable across restarts."""
    async def get(self) -> Credential | None: ...
    async def set(self, credential: Credential) -> None: ...
    async def clear(self) -> None: ...


# Backoff sleep, seconds. asyncio.sleep in production, a recorder in tests.
Sleep = Callable[[float], Awaitable[None]]
