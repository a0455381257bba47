"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.core.config import Settings
from backend.app.db.session import Base
from backend.app.main import create_app
from backend.app.models.checkpoint import CheckpointRecord  # noqa: F401
from backend.app.models.unit import UnitRecord  # noqa: F401
from backend.app.stores.memory import InMemoryCheckpointStore, InMemoryUnitStore
from backend.app.stores.sql import SqlCheckpointStore, SqlUnitStore

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Each store test runs against both backends
@pytest.fixture(params=["memory", "sql"])
def checkpoint_store(request, session_factory):
    if request.param == "memory":
        return InMemoryCheckpointStore()
    return SqlCheckpointStore(session_factory)


@pytest.fixture(params=["memory", "sql"])
def unit_store(request, session_factory):
    if request.param == "memory":
        return InMemoryUnitStore()
    return SqlUnitStore(session_factory)


@pytest.fixture
def memory_stores():
    return InMemoryCheckpointStore(), InMemoryUnitStore()


@pytest.fixture
def app():
    """Fresh application with its own in-memory stores."""
    return create_app(Settings(storage_backend="memory"))


@pytest.fixture
async def client(app):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(engine, session_factory):
    """Async client for an application running on the SQL stores."""
    db_app = create_app(
        Settings(storage_backend="database", database_url=TEST_DATABASE_URL),
        engine=engine,
        session_factory=session_factory,
    )
    async with AsyncClient(transport=ASGITransport(app=db_app), base_url="http://test") as ac:
        yield ac
