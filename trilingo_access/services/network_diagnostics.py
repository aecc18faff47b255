"""Network Diagnostics - connectivity probes against the configured backend and fallbacks.

Invariants:
    - Probes are single attempts on the public channel: no retry, no escalation, no credential
    - Probes never raise AccessError: every outcome becomes a DiagnosticResult
    - A 401 to dummy login credentials proves the server is up (counts as success)
    - Fallback URLs equal to the primary base URL are skipped

Design Decisions:
    - Reuses HttpChannel.send with a per-call base_url/timeout instead of a second client
    - Failure message chosen from the primary probe (the URL the app actually uses)
"""

import logging
from dataclasses import dataclass

from trilingo_access.core.domain_types import ChannelName, HttpMethod, TransportFailure
from trilingo_access.core.request_types import AttemptOutcome, RequestDescriptor
from trilingo_access.infrastructure.access_client import AccessClient

logger = logging.getLogger(__name__)

PROBE_PATH = "/auth/login"
PROBE_BODY = {"identifier": "test", "password": "test"}
_AUTH_WORKING_STATUSES = frozenset({400, 401})

_FAILURE_MESSAGES = {
    TransportFailure.CONNECT: (
        "Backend server is not running or not accessible. "
        "Check the configured URL and that the server is listening."
    ),
    TransportFailure.DNS: (
        "Backend server URL not found. Check the host name in TRILINGO_API_BASE_URL."
    ),
    TransportFailure.TIMEOUT: (
        "Connection timeout. Check if backend is running and firewall allows connection."
    ),
}


@dataclass(frozen=True)
class DiagnosticResult:
    success: bool
    message: str
    url: str | None = None


def _probe_descriptor() -> RequestDescriptor:
    return RequestDescriptor.write(HttpMethod.POST, PROBE_PATH, dict(PROBE_BODY))


def _failure_message(outcome: AttemptOutcome) -> str:
    if outcome.responded:
        return f"Server responded with error: {outcome.status_code}"
    if outcome.failure in _FAILURE_MESSAGES:
        return _FAILURE_MESSAGES[outcome.failure]
    if outcome.failure is TransportFailure.ABORTED:
        return "No response from server. Check network and backend status."
    return outcome.detail or "Unknown network error"


class NetworkDiagnostics:
    """Troubleshooting probes for the connectivity help screen."""

    def __init__(self, client: AccessClient):
        self.client = client
        self.settings = client.settings

    async def _probe(self, base_url: str, timeout_seconds: float) -> AttemptOutcome:
        channel = self.client.channel(ChannelName.PUBLIC)
        return await channel.send(
            _probe_descriptor(), base_url=base_url, timeout_seconds=timeout_seconds,
        )

    async def test_connection(self) -> DiagnosticResult:
        base_url = self.settings.api_base_url
        logger.info(f"Testing connection to: {base_url}", extra={"url": base_url})
        primary = await self._probe(base_url, self.settings.diagnostics_timeout_seconds)
        if primary.ok:
            return DiagnosticResult(
                True, f"Connection successful! Status: {primary.status_code}", base_url,
            )
        if primary.status_code == 401:
            return DiagnosticResult(
                True,
                "Connection successful! Server is running "
                "(401 = expected for invalid credentials)",
                base_url,
            )

        for url in self.settings.fallback_api_urls:
            if url == base_url:
                continue
            logger.info(f"Testing fallback URL: {url}", extra={"url": url})
            fallback = await self._probe(url, self.settings.fallback_timeout_seconds)
            if fallback.ok:
                return DiagnosticResult(
                    True, f"Fallback URL works! Use: {url} (Status: {fallback.status_code})", url,
                )
            if fallback.status_code == 401:
                return DiagnosticResult(
                    True,
                    f"Fallback URL works! Use: {url} (401 = expected for invalid credentials)",
                    url,
                )
            logger.info(
                f"Fallback {url} failed: {_failure_message(fallback)}", extra={"url": url},
            )

        message = _failure_message(primary)
        logger.warning(f"Connection test failed: {message}", extra={"url": base_url})
        return DiagnosticResult(False, message, base_url)

    async def test_auth_endpoint(self) -> DiagnosticResult:
        base_url = self.settings.api_base_url
        outcome = await self._probe(base_url, self.settings.diagnostics_timeout_seconds)
        if outcome.ok:
            return DiagnosticResult(
                True, f"Auth endpoint accessible! Status: {outcome.status_code}", base_url,
            )
        if outcome.status_code in _AUTH_WORKING_STATUSES:
            return DiagnosticResult(
                True, "Auth endpoint is working (expected authentication error)", base_url,
            )
        return DiagnosticResult(
            False, f"Auth endpoint error: {_failure_message(outcome)}", base_url,
        )

    def network_info(self) -> str:
        fallbacks = ", ".join(self.settings.fallback_api_urls) or "(none)"
        return (
            "=== Network Configuration ===\n"
            f"API Base URL: {self.settings.api_base_url}\n"
            f"Direct API URL: {self.settings.direct_api_base_url or '(not set)'}\n"
            f"Fallback URLs: {fallbacks}\n"
            "\n"
            "=== Troubleshooting Steps ===\n"
            "1. Make sure backend is running on the configured URL\n"
            "2. Verify firewall is not blocking the connection\n"
            "3. For physical devices, use your computer's IP address\n"
            "4. For Android emulator, use: http://10.0.2.2:5166/api\n"
            "5. For iOS simulator, use: http://localhost:5166/api\n"
            "6. Override the URL with TRILINGO_API_BASE_URL (environment or .env)\n"
        )

    async def run_all(self) -> dict[str, DiagnosticResult]:
        logger.info(self.network_info())
        connection = await self.test_connection()
        auth = await self.test_auth_endpoint()
        logger.info(
            f"Diagnostics: connection={connection.success} auth={auth.success}",
        )
        return {"connection": connection, "auth": auth}
