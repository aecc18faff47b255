"""Local Storage Infrastructure - SQLAlchemy Base for on-device persistence.

Invariants:
    - Single async engine per access layer (owned by LocalStorage)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite driver: file-backed SQLite survives process restarts without a server
"""
