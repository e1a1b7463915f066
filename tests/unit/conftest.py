"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.caller import CallerContext
from domain.entities.role import SecurityRole


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.workspaces = AsyncMock()
        self.users = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type:
            await self.rollback()


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> int:
    return 42


@pytest.fixture
def workspace_id() -> int:
    return 7


@pytest.fixture
def caller(user_id: int, workspace_id: int) -> CallerContext:
    """An authenticated caller with an active workspace and no global roles."""
    return CallerContext(user_id=user_id, active_workspace_id=workspace_id)


@pytest.fixture
def admin_caller(user_id: int, workspace_id: int) -> CallerContext:
    """An authenticated global admin."""
    return CallerContext(
        user_id=user_id,
        active_workspace_id=workspace_id,
        global_roles=frozenset({SecurityRole.ROLE_GLOBAL_ADMIN}),
    )
