"""Root conftest — shared test configuration."""

import os

# Settings are read on import of directory_api.main; never sign with a real secret
os.environ.setdefault("JWT_SECRET", "test-session-secret")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
