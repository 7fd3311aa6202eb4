"""Service test fixtures — note store over in-memory storage, async DB, HTTP client.

Invariants:
    - Every test gets fresh storage (in-memory) and a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - Time is pinned by FixedClock; tests move it explicitly

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for storage
      and route tests (PostgreSQL-specific features not exercised)
    - StaticPool: one shared connection so every session sees the same
      in-memory database
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from notevault.api.deps import get_identity_verifier
from notevault.core.domain_types import Identity, UnixTimestamp
from notevault.db.base import Base
from notevault.infrastructure.database import get_db, DatabaseSessionManager
from notevault.infrastructure.keyed_storage import InMemoryKeyedStorage
from notevault.services.note_store import NoteStore
import notevault.infrastructure.database as db_module
import notevault.models  # noqa: F401
from notevault.main import app

OWNER_A = Identity(b"\xaa" * 32)
OWNER_B = Identity(b"\xbb" * 32)


class FixedClock:
    """Clock whose `now` only moves when a test says so."""

    def __init__(self, t: int = 100):
        self.t = t

    def now(self) -> UnixTimestamp:
        return UnixTimestamp(self.t)


@pytest.fixture
def owner_a() -> Identity:
    return OWNER_A


@pytest.fixture
def owner_b() -> Identity:
    return OWNER_B


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(100)


@pytest.fixture
def storage() -> InMemoryKeyedStorage:
    return InMemoryKeyedStorage()


@pytest.fixture
def store(storage, clock) -> NoteStore:
    return NoteStore(storage, clock)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Readiness probe reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth_headers():
    """Build Authorization headers for an identity."""
    verifier = get_identity_verifier()

    def _headers(identity: Identity) -> dict:
        return {"Authorization": f"Bearer {verifier.issue_token(identity)}"}

    return _headers
