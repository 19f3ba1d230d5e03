"""API test fixtures: FastAPI app + httpx client over ASGI.

Invariants:
    - client: real SqlUserRepository over the per-test in-memory SQLite store
    - make_client: any repository (usually FakeUserRepository) injected via create_app
    - Redirects are never followed, so 303 responses are asserted directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from userbook.main import create_app


class FakeUserRepository:
    """UserRepository whose behaviour is set per test.

    Each attribute holds either a return value or an exception instance to raise.
    """

    def __init__(self, **outcomes):
        self.outcomes = outcomes
        self.calls: list[tuple] = []

    async def _outcome(self, name, *args, default=None):
        self.calls.append((name, *args))
        outcome = self.outcomes.get(name, default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def list_users(self, limit, offset):
        return await self._outcome("list_users", limit, offset, default=[])

    async def get_user(self, user_id):
        return await self._outcome("get_user", user_id)

    async def create_user(self, user):
        return await self._outcome("create_user", user, default=user.with_id(1))

    async def update_user(self, user):
        return await self._outcome("update_user", user)

    async def delete_user(self, user_id):
        return await self._outcome("delete_user", user_id)

    async def ping(self):
        return await self._outcome("ping", default=True)


@pytest.fixture
async def client(settings, repository):
    """FastAPI test client backed by the SQLite repository."""
    app = create_app(settings, repository=repository)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def make_client(settings):
    """Factory: build a client around a given repository."""
    def _make(repository) -> AsyncClient:
        app = create_app(settings, repository=repository)
        return AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        )
    return _make


@pytest.fixture
def make_fake():
    """Factory: FakeUserRepository(**outcomes)."""
    return FakeUserRepository
