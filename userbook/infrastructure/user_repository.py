"""SQL User Repository: parameterized queries over the users table.

Invariants:
    - Sole owner of persisted User state; returns core User values, never ORM rows
    - No rows / zero rows affected -> UserNotFoundError
    - list_users with an offset past the 64-bit range returns [] without a query
    - Uniqueness violation -> DuplicateEmailError, transaction rolled back
    - Any other store failure -> DatabaseError
    - Every operation runs under statement_timeout seconds; on expiry the
      statement is cancelled and DatabaseError(operation="timeout") is raised
    - Store-specific error inspection happens here and nowhere else
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userbook.core.domain_types import User, UserId
from userbook.core.errors import (
    DatabaseError, DuplicateEmailError, UserNotFoundError,
)
from userbook.core.parse_int import INT64_MAX
from userbook.infrastructure.database import DatabaseSessionManager
from userbook.models.user import User as UserModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a uniqueness-constraint violation."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


def _to_domain(row: UserModel) -> User:
    return User(id=UserId(row.id), name=row.name, email=row.email, age=row.age)


class SqlUserRepository:
    """UserRepository backed by SQLAlchemy sessions from a DatabaseSessionManager."""

    def __init__(
        self, db_manager: DatabaseSessionManager, statement_timeout: float = 5.0,
    ):
        self._db = db_manager
        self._timeout = statement_timeout

    async def _run(
        self, operation: str, work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        async def unit() -> T:
            async with self._db.session() as db:
                return await work(db)

        try:
            return await asyncio.wait_for(unit(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(
                f"{operation} exceeded {self._timeout}s deadline",
                extra={"operation": operation},
            )
            raise DatabaseError(
                f"{operation} exceeded {self._timeout}s deadline", "timeout",
            )

    async def list_users(self, limit: int, offset: int) -> list[User]:
        """One page of users ordered by id; an unreachable offset is an empty page."""
        if offset > INT64_MAX:
            return []

        async def work(db: AsyncSession) -> list[User]:
            result = await db.execute(
                select(UserModel)
                .order_by(UserModel.id)
                .limit(limit)
                .offset(offset),
            )
            return [_to_domain(row) for row in result.scalars().all()]

        return await self._run("list_users", work)

    async def get_user(self, user_id: int) -> User:
        async def work(db: AsyncSession) -> User:
            result = await db.execute(
                select(UserModel).where(UserModel.id == user_id),
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise UserNotFoundError(user_id)
            return _to_domain(row)

        return await self._run("get_user", work)

    async def create_user(self, user: User) -> User:
        """Insert a row and return the user with the store-assigned id."""
        async def work(db: AsyncSession) -> User:
            row = UserModel(name=user.name, email=user.email, age=user.age)
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                if is_unique_violation(e):
                    raise DuplicateEmailError(user.email)
                raise
            return user.with_id(row.id)

        return await self._run("create_user", work)

    async def update_user(self, user: User) -> None:
        """Replace name, email and age of the row matching user.id."""
        if user.id is None:
            raise ValueError("update_user requires a user with an id")

        async def work(db: AsyncSession) -> None:
            try:
                result = await db.execute(
                    update(UserModel)
                    .where(UserModel.id == user.id)
                    .values(name=user.name, email=user.email, age=user.age),
                )
                if result.rowcount == 0:
                    raise UserNotFoundError(user.id)
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                if is_unique_violation(e):
                    raise DuplicateEmailError(user.email)
                raise

        await self._run("update_user", work)

    async def delete_user(self, user_id: int) -> None:
        async def work(db: AsyncSession) -> None:
            result = await db.execute(
                delete(UserModel).where(UserModel.id == user_id),
            )
            if result.rowcount == 0:
                raise UserNotFoundError(user_id)
            await db.commit()

        await self._run("delete_user", work)

    async def ping(self) -> bool:
        return await self._db.health_check()
