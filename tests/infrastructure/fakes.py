"""Test doubles for the infrastructure layer - recording sleep, in-memory store, scripted transport.

Invariants:
    - RecordingSleep never waits; it records requested delays in seconds
    - MemoryCredentialStore counts set/clear calls so tests can assert "exactly once"
    - ScriptedBackend answers per (channel, path) from queued responses, recording every request

Design Decisions:
    - Channel inferred from the Authorization header: the only observable difference on the wire
"""

from collections import defaultdict, deque

import httpx

from trilingo_access.core.domain_types import Credential


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def delays_ms(self) -> list[int]:
        return [round(d * 1000) for d in self.delays]


class MemoryCredentialStore:
    def __init__(self, token: str | None = None):
        self.token = Credential(token) if token else None
        self.set_calls = 0
        self.clear_calls = 0

    async def get(self) -> Credential | None:
        return self.token

    async def set(self, credential: Credential) -> None:
        self.set_calls += 1
        self.token = credential

    async def clear(self) -> None:
        self.clear_calls += 1
        self.token = None


class ScriptedBackend:
    """httpx.MockTransport handler with per-route response queues.

    Routes are keyed by (channel, path) where channel is "public" or
    "authenticated". The last queued response repeats once the queue drains.
    """

    def __init__(self):
        self._routes: dict[tuple[str, str], deque] = defaultdict(deque)
        self.requests: list[httpx.Request] = []

    def on(self, channel: str, path: str, *responses) -> "ScriptedBackend":
        self._routes[(channel, path)].extend(responses)
        return self

    def calls(self, channel: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if (channel is None or _channel_of(r) == channel)
            and (path is None or r.url.path.endswith(path))
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        queue = self._routes.get((_channel_of(request), path))
        if not queue:
            return httpx.Response(404, json={"message": f"no route for {path}"})
        response = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, int):
            return httpx.Response(response)
        status, body = response
        return httpx.Response(status, json=body)


def _channel_of(request: httpx.Request) -> str:
    return "authenticated" if "authorization" in request.headers else "public"
