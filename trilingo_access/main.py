"""Trilingo Access Layer - composition root.

Invariants:
    - Logging configured once, before any component logs
    - Local storage schema exists before the credential store is first read
    - Everything opened here is closed here (HTTP pool, storage engine), even on error
    - Resource facades share one AccessClient: one credential, one connection pool

Design Decisions:
    - Async context manager over module globals: the host app owns the lifecycle,
      tests open isolated layers with their own transport and storage file
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from trilingo_access.config import Settings, get_settings
from trilingo_access.infrastructure.access_client import AccessClient
from trilingo_access.infrastructure.credential_store import SqlCredentialStore
from trilingo_access.infrastructure.local_storage import LocalStorage
from trilingo_access.infrastructure.observability import setup_logging
from trilingo_access.infrastructure.retry_engine import RetryEngine
from trilingo_access.services.auth_resources import AuthResources
from trilingo_access.services.content_resources import ContentResources
from trilingo_access.services.network_diagnostics import NetworkDiagnostics
from trilingo_access.services.payment_resources import PaymentResources
from trilingo_access.services.progress_resources import ProgressResources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrilingoApi:
    """Everything the app calls, grouped by backend area."""
    client: AccessClient
    auth: AuthResources
    content: ContentResources
    progress: ProgressResources
    payments: PaymentResources
    diagnostics: NetworkDiagnostics


@asynccontextmanager
async def open_access_layer(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    retry_engine: RetryEngine | None = None,
    configure_logging: bool = True,
) -> AsyncIterator[TrilingoApi]:
    """Open storage and HTTP resources; yield the resource facades."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    storage = LocalStorage(settings.storage_url)
    try:
        await storage.create_schema()
        credentials = SqlCredentialStore(storage, settings.credential_key)
        async with AccessClient(
            settings, credentials,
            http_client=http_client, retry_engine=retry_engine,
        ) as client:
            logger.info(
                f"Trilingo access layer opened against {settings.api_base_url}",
                extra={"url": settings.api_base_url},
            )
            yield TrilingoApi(
                client=client,
                auth=AuthResources(client),
                content=ContentResources(client),
                progress=ProgressResources(client),
                payments=PaymentResources(client),
                diagnostics=NetworkDiagnostics(client),
            )
    finally:
        await storage.dispose()
        logger.info("Trilingo access layer closed")
