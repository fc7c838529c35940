"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import Profile, ProfileRole, Subscription
from domain.entities.session import Identity, Session


class FakeUnitOfWork:
    """Fake Unit of Work with profile and note repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.notes = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_session(
    user_id: UUID | None = None,
    email: str = "user@example.com",
    **profile_fields: Any,
) -> Session:
    """Build a Session whose profile uses defaults unless overridden."""
    user_id = user_id or uuid4()
    return Session(
        identity=Identity(id=user_id, email=email),
        profile=Profile(id=user_id, email=email, **profile_fields),
    )


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def user_session(user_id: UUID) -> Session:
    """Session of a regular, active, Free user."""
    return make_session(user_id)


@pytest.fixture
def admin_session() -> Session:
    """Session of an administrator."""
    return make_session(
        email="admin@example.com",
        role=ProfileRole.ADMIN,
        subscription=Subscription.ADMIN,
    )
