"""Pytest configuration and fixtures."""

import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import Settings
from infrastructure.database.profile_store import ProfileStore
from infrastructure.database.session import create_engine, create_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.factories import FakeProfileSource

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        remote_base_url="https://profiles.test/",
        default_batch_size=10,
    )


@pytest.fixture
async def engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = create_engine(test_settings)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
async def store(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], engine: AsyncEngine
) -> AsyncGenerator[ProfileStore, None]:
    """A fresh, empty profile store on in-memory SQLite."""
    store = ProfileStore(uow_factory, engine=engine)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def source() -> FakeProfileSource:
    return FakeProfileSource()
