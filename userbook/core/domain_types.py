"""Domain Types: the User value object and the enums that name every failure reason.

Invariants:
    - UserId wraps a 64-bit integer assigned by the store; never chosen by callers
    - User is frozen: handlers hold transient, request-scoped copies only
    - Every rejection reason carries its user-facing message as the enum value

Design Decisions:
    - User is a dataclass, separate from the ORM row (models/user.py), so core
      never imports SQLAlchemy
    - str Enums: messages render straight into templates without lookups
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Entities ────────────────────────────────────────────────────

@dataclass(frozen=True)
class User:
    """A person record. `id` is None until the store assigns one."""
    name: str
    email: str
    age: int
    id: UserId | None = None

    def with_id(self, user_id: int) -> "User":
        return replace(self, id=UserId(user_id))


# ─── Enums ───────────────────────────────────────────────────────

class RejectionReason(str, Enum):
    """Why raw form input was refused. Value is the message shown to the user."""
    EMPTY_FIELD = "name and email are required"
    INVALID_EMAIL_FORMAT = "invalid email format"
    INVALID_AGE = "age must be a number"
    NON_POSITIVE_AGE = "age must be greater than 0"


class PaginationRejection(str, Enum):
    """Why a pagination query parameter was refused."""
    INVALID_PAGE = "invalid page"
    INVALID_LIMIT = "invalid limit"
