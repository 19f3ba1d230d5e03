"""User ORM: the persisted row behind the User domain value.

Invariants:
    - id is a BigInteger primary key assigned by the store and never reused
      (AUTOINCREMENT on SQLite, sequence elsewhere)
    - email is unique (uq_users_email); the repository translates violations
    - age > 0 enforced by a CHECK constraint as well as by the validator
    - age is 64-bit, covering every value the validator accepts
    - name and email are non-nullable
"""

from sqlalchemy import BigInteger, CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from userbook.db.base import Base


class User(Base):
    """One row per person record."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("age > 0", name="ck_users_age_positive"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), nullable=False,
    )
