"""Root conftest - shared test configuration."""

import os

# Tests never talk to the production CDN or write the app's storage file
os.environ.setdefault("TRILINGO_API_BASE_URL", "http://backend.test/api")
os.environ.setdefault("TRILINGO_STORAGE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TRILINGO_LOG_FORMAT", "text")
