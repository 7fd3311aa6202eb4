"""Root conftest — shared test configuration."""

import os

# Never pick up a developer's real database or signing secret
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
