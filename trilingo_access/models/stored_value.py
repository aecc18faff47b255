"""Stored Value ORM - single-key string storage, the device-local key/value table.

Invariants:
    - key is the primary key: at most one value per key
    - value is the raw string as written (no encoding, no JSON wrapping)
    - updated_at refreshed on every write
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from trilingo_access.db.base import Base


class StoredValue(Base):
    """One named entry in local storage (e.g. the bearer token under `authToken`)."""
    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(120), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
