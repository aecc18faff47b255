"""ORM Models - SQLAlchemy declarative models for on-device storage.

Invariants:
    - All models inherit from Base (db/base.py)
    - Only credential state is persisted here; app state lives elsewhere

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all runs
"""

from trilingo_access.models.stored_value import StoredValue  # noqa: F401
