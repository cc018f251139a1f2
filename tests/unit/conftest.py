"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.profile import Profile


class FakeUnitOfWork:
    """Fake Unit of Work with a profile repository mock for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
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


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    uow = FakeUnitOfWork()
    uow.profiles.handle_exists.return_value = False
    uow.profiles.get_by_handle.return_value = None
    uow.profiles.create.side_effect = lambda profile: profile
    uow.profiles.update.side_effect = lambda profile: profile
    return uow


@pytest.fixture
def user_id() -> str:
    """A Clerk-style user ID."""
    return "user_ab12cd34ef56"


@pytest.fixture
def profile(user_id: str) -> Profile:
    """An existing profile with a machine-assigned handle."""
    return Profile(id=user_id, handle="user-ab12cd34", display_name="New Player")
