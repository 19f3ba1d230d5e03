"""Root conftest: shared test configuration and database fixtures.

Invariants:
    - Every test that touches the store gets a fresh in-memory SQLite database
    - Tests never read a real DATABASE_DSN
"""

import os

# Ensure tests don't accidentally use a real database
os.environ["DATABASE_DSN"] = "sqlite+aiosqlite:///:memory:"

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from userbook.config import Settings  # noqa: E402
from userbook.db.base import Base  # noqa: E402
from userbook.infrastructure.database import DatabaseSessionManager  # noqa: E402
from userbook.infrastructure.user_repository import SqlUserRepository  # noqa: E402
import userbook.models  # noqa: E402,F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager(test_engine)


@pytest.fixture
def repository(db_manager):
    return SqlUserRepository(db_manager, statement_timeout=5.0)


@pytest.fixture
def settings():
    return Settings(
        database={"dsn": "sqlite+aiosqlite:///:memory:"},
        log={"level": "DEBUG", "format": "text"},
    )
