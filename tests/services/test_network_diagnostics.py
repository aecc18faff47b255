"""Network Diagnostics - probe outcomes, fallback URLs and failure messages.

Tests:
    - 401 to dummy credentials counts as a reachable server
    - Primary failure tries fallbacks (skipping the primary) and reports the working one
    - Every probe is a single public attempt with the diagnostics timeout
    - Failure messages per transport failure type
"""

import httpx
import pytest

from trilingo_access.config import Settings
from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.services.network_diagnostics import NetworkDiagnostics

from tests.infrastructure.fakes import MemoryCredentialStore


def _diagnostics(handler, **settings_kwargs):
    settings_kwargs.setdefault("api_base_url", "http://primary.test/api")
    settings = Settings(_env_file=None, **settings_kwargs)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = AccessClient(settings, MemoryCredentialStore("tok"), http_client=http)
    return NetworkDiagnostics(client), http


async def test_fake_backend_login_401_is_success(api):
    result = await api.diagnostics.test_connection()
    assert result.success
    assert "401" in result.message
    assert result.url == "http://backend.test/api"


async def test_2xx_is_success():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    diagnostics, http = _diagnostics(handler)
    async with http:
        result = await diagnostics.test_connection()
    assert result.success
    assert result.message == "Connection successful! Status: 200"
    assert len(seen) == 1
    assert "authorization" not in seen[0].headers
    assert seen[0].extensions["timeout"]["connect"] == 5.0


async def test_fallback_used_when_primary_refuses():
    hosts = []

    def handler(request):
        hosts.append(request.url.host)
        if request.url.host == "primary.test":
            raise httpx.ConnectError("refused")
        return httpx.Response(401, json={})

    diagnostics, http = _diagnostics(
        handler,
        fallback_api_urls=["http://primary.test/api", "http://10.0.2.2:5166/api"],
    )
    async with http:
        result = await diagnostics.test_connection()
    assert result.success
    assert result.url == "http://10.0.2.2:5166/api"
    assert "Fallback URL works" in result.message
    assert hosts == ["primary.test", "10.0.2.2"]


@pytest.mark.parametrize("exc,fragment", [
    (httpx.ConnectError("refused"), "not running"),
    (httpx.ConnectTimeout("slow"), "Connection timeout"),
    (httpx.ReadError("reset"), "No response from server"),
])
async def test_failure_messages(exc, fragment):
    def handler(request):
        raise exc

    diagnostics, http = _diagnostics(handler, fallback_api_urls=["http://fallback.test"])
    async with http:
        result = await diagnostics.test_connection()
    assert not result.success
    assert fragment in result.message
    assert result.url == "http://primary.test/api"


async def test_server_error_reported_with_status():
    diagnostics, http = _diagnostics(lambda request: httpx.Response(503))
    async with http:
        result = await diagnostics.test_connection()
    assert not result.success
    assert result.message == "Server responded with error: 503"


@pytest.mark.parametrize("status", [400, 401])
async def test_auth_endpoint_working_on_expected_errors(status):
    diagnostics, http = _diagnostics(lambda request: httpx.Response(status))
    async with http:
        result = await diagnostics.test_auth_endpoint()
    assert result.success
    assert "working" in result.message


async def test_auth_endpoint_failure():
    diagnostics, http = _diagnostics(lambda request: httpx.Response(500))
    async with http:
        result = await diagnostics.test_auth_endpoint()
    assert not result.success


async def test_run_all_returns_both_results(api):
    results = await api.diagnostics.run_all()
    assert set(results) == {"connection", "auth"}
    assert results["connection"].success and results["auth"].success


async def test_network_info_names_urls():
    diagnostics, http = _diagnostics(lambda request: httpx.Response(200))
    async with http:
        info = diagnostics.network_info()
    assert "http://primary.test/api" in info
    assert "Troubleshooting" in info
