"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.role import SecurityRole
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import (
    Base,
    UserModel,
    UserWorkspaceRoleModel,
    WorkspaceModel,
)

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = 1
TEST_MEMBER_ID = 2


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


class Seeder:
    """Insert rows directly, bypassing the service layer."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def user(
        self,
        email: str,
        user_id: int | None = None,
        active_workspace_id: int | None = None,
    ) -> int:
        async with self._session_factory() as session:
            model = UserModel(id=user_id, email=email, active_workspace_id=active_workspace_id)
            session.add(model)
            await session.commit()
            return model.id

    async def workspace(self, name: str, description: str | None = None) -> int:
        async with self._session_factory() as session:
            model = WorkspaceModel(name=name, description=description)
            session.add(model)
            await session.commit()
            return model.id

    async def role(self, user_id: int, workspace_id: int, role_name: str) -> None:
        async with self._session_factory() as session:
            session.add(
                UserWorkspaceRoleModel(
                    user_id=user_id, workspace_id=workspace_id, role_name=role_name
                )
            )
            await session.commit()

    async def set_active_workspace(self, user_id: int, workspace_id: int | None) -> None:
        async with self._session_factory() as session:
            model = await session.get(UserModel, user_id)
            assert model is not None
            model.active_workspace_id = workspace_id
            await session.commit()


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    """Helper for inserting test rows."""
    return Seeder(session_factory)


@pytest.fixture
def test_user() -> TokenUser:
    """A global admin test user with a fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="admin@example.com",
        display_name="Test Admin",
        roles=[SecurityRole.ROLE_GLOBAL_ADMIN.value],
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_user)}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def member_user() -> TokenUser:
    """A user without global roles."""
    return TokenUser(
        id=TEST_MEMBER_ID,
        email="member@example.com",
        display_name="Test Member",
        roles=[SecurityRole.ROLE_EXAMINER.value],
    )


def _create_test_app(
    session_factory: async_sessionmaker[AsyncSession],
    user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Create an app wired to the test database.

    The app:
    - Uses an in-memory SQLite database
    - Overrides auth dependency to return ``user``
    - Overrides the service and session dependencies to use the test database
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import get_workspace_service
    from domain.services.workspace_service import WorkspaceService
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    # Override auth to return the user directly
    async def override_get_user() -> TokenUser:
        return user

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    # Create a UoW factory that uses test session
    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def override_get_workspace_service() -> WorkspaceService:
        return WorkspaceService(test_uow_factory, login_wait_base_seconds=0)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_workspace_service] = override_get_workspace_service
    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    seed: Seeder,
    test_user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated test client acting as a global admin."""
    await seed.user(test_user.email, user_id=test_user.id)
    app = _create_test_app(session_factory, test_user, auth_provider)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def member_client(
    session_factory: async_sessionmaker[AsyncSession],
    seed: Seeder,
    member_user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated test client acting as a user without global roles."""
    await seed.user(member_user.email, user_id=member_user.id)
    app = _create_test_app(session_factory, member_user, auth_provider)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
