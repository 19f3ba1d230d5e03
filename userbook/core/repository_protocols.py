"""Boundary Protocols: the contract between route handlers and persistence.

Invariants:
    - Core NEVER imports from infrastructure; implementations are injected
    - Failures are raised as core/errors.py types only:
      UserNotFoundError, DuplicateEmailError, DatabaseError
    - Every method runs under the caller's task and aborts when it is cancelled

Design Decisions:
    - Protocol over ABC: the SQL repository and test fakes satisfy it structurally
"""

from typing import Protocol

from userbook.core.domain_types import User


class UserRepository(Protocol):
    """Contract for user persistence, implemented by infrastructure/user_repository.py."""
    async def list_users(self, limit: int, offset: int) -> list[User]: ...
    async def get_user(self, user_id: int) -> User: ...
    async def create_user(self, user: User) -> User: ...
    async def update_user(self, user: User) -> None: ...
    async def delete_user(self, user_id: int) -> None: ...
    async def ping(self) -> bool: ...
