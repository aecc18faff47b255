"""Credential Store - the single bearer token, persisted under one named storage key.

Invariants:
    - At most one live credential (one row, primary key = credential_key)
    - get() never raises: any storage failure is logged and reads as None
    - set()/clear() raise LocalStorageError on failure
    - The token value itself is never logged

Design Decisions:
    - Read lazily on every authenticated attempt: no in-memory cache to go stale
    - merge() for set: insert-or-replace in one statement
"""

import logging

from sqlalchemy import delete, select

from trilingo_access.core.domain_types import Credential
from trilingo_access.core.errors import LocalStorageError
from trilingo_access.infrastructure.local_storage import LocalStorage
from trilingo_access.models.stored_value import StoredValue

logger = logging.getLogger(__name__)


class SqlCredentialStore:
    """CredentialStore backed by the local_storage table."""

    def __init__(self, storage: LocalStorage, key: str = "authToken"):
        self._storage = storage
        self._key = key

    async def get(self) -> Credential | None:
        try:
            async with self._storage.session() as db:
                result = await db.execute(
                    select(StoredValue.value).where(StoredValue.key == self._key),
                )
                value = result.scalar_one_or_none()
        except LocalStorageError as e:
            logger.warning(f"Credential read failed, treating as absent: {e}")
            return None
        return Credential(value) if value else None

    async def set(self, credential: Credential) -> None:
        if not credential:
            raise ValueError("credential must be a non-empty string")
        async with self._storage.session() as db:
            await db.merge(StoredValue(key=self._key, value=credential))
            await db.commit()
        logger.info("Credential stored")

    async def clear(self) -> None:
        async with self._storage.session() as db:
            await db.execute(delete(StoredValue).where(StoredValue.key == self._key))
            await db.commit()
        logger.info("Credential cleared")
