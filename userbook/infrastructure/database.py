"""Database Session Manager: async connection pool with automatic rollback and health checks.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - Pool is bounded: max_idle_conns kept open, max_open_conns total
    - Connections are recycled after conn_max_lifetime seconds and pre-pinged
    - SQLAlchemy exceptions not handled by a repository are mapped to DatabaseError

Design Decisions:
    - One manager per application, created in the FastAPI lifespan and stored on
      app.state; nothing is held at module level
    - expire_on_commit=False: ORM rows stay readable after commit in async code
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from userbook.core.errors import DatabaseError, UserbookError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_dsn(
        cls,
        dsn: str,
        max_open_conns: int = 25,
        max_idle_conns: int = 5,
        conn_max_lifetime: int = 300,
    ) -> "DatabaseSessionManager":
        """Build a manager with a bounded pool for the given DSN."""
        url = make_url(dsn)
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            # in-memory SQLite runs on a single static connection
            return cls(create_async_engine(url))
        return cls(create_async_engine(
            url,
            pool_size=max_idle_conns,
            max_overflow=max(max_open_conns - max_idle_conns, 0),
            pool_recycle=conn_max_lifetime,
            pool_pre_ping=True,
        ))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except UserbookError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes).

        Store failures and refused connections report False with the cause
        logged; anything else is a bug and propagates.
        """
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (DatabaseError, OSError) as e:
            logger.error(
                f"DB health check failed: {e}", exc_info=True,
                extra={"operation": "health_check"},
            )
            return False

    async def close(self) -> None:
        await self.engine.dispose()
