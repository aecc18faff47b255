"""Service test fixtures - a full access layer wired to the FastAPI fake backend.

Invariants:
    - Every test gets a fresh fake backend and a fresh SQLite storage file
    - Backoff sleeps are recorded, never awaited
    - Logging is left to pytest's capture (configure_logging=False)
"""

import httpx
import pytest

from trilingo_access.config import Settings
from trilingo_access.infrastructure.retry_engine import RetryEngine
from trilingo_access.main import open_access_layer
from trilingo_access.schemas.auth import LoginRequest

from tests.infrastructure.fakes import RecordingSleep
from tests.services.fake_backend import FakeBackend, PASSWORD, USER


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        api_base_url="http://backend.test/api",
        storage_url=f"sqlite+aiosqlite:///{tmp_path / 'local.db'}",
    )


@pytest.fixture
async def api(fake_backend, settings, sleep):
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=fake_backend.app))
    async with open_access_layer(
        settings,
        http_client=http,
        retry_engine=RetryEngine(sleep=sleep),
        configure_logging=False,
    ) as layer:
        yield layer
    await http.aclose()


@pytest.fixture
async def logged_in_api(api):
    await api.auth.login(LoginRequest(identifier=USER["username"], password=PASSWORD))
    return api
