"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.role_transformer import UserRoleTransformer
from domain.services.workspace_service import WorkspaceService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_role_transformer() -> UserRoleTransformer:
    """Get the shared role transformer."""
    return UserRoleTransformer()


@lru_cache
def get_workspace_service() -> WorkspaceService:
    """Get Workspace service instance."""
    return WorkspaceService(get_uow_factory(), role_transformer=get_role_transformer())
