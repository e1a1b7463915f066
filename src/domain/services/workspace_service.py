"""Workspace service layer with business logic."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime

import structlog

from core.config import settings
from core.exceptions import AuthenticationError, DuplicateRoleAssignmentError
from domain.entities.caller import CallerContext
from domain.entities.role import IMPLICIT_WORKSPACE_ROLES, UserRole, to_security_role
from domain.entities.workspace import ActiveWorkspaceIdAndRole, Workspace
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.role_transformer import UserRoleTransformer

logger = structlog.get_logger()

CallerRefresh = Callable[[], Awaitable[CallerContext]]


class WorkspaceService:
    """Service layer for workspaces and the roles users hold in them."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        role_transformer: UserRoleTransformer | None = None,
        login_wait_attempts: int = settings.login_wait_attempts,
        login_wait_base_seconds: float = settings.login_wait_base_seconds,
        login_wait_max_seconds: float = settings.login_wait_max_seconds,
    ) -> None:
        self._uow_factory = uow_factory
        self._roles = role_transformer or UserRoleTransformer()
        self._login_wait_attempts = login_wait_attempts
        self._login_wait_base = login_wait_base_seconds
        self._login_wait_max = login_wait_max_seconds

    async def get_all_workspaces(self) -> list[Workspace]:
        """Get every workspace."""
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_all_workspaces()

    async def get_workspace_by_id(self, workspace_id: int) -> Workspace:
        """Get a workspace by ID. The store raises if it does not exist."""
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_by_id(workspace_id)

    async def get_active_workspace(self, caller: CallerContext) -> Workspace | None:
        """Get the caller's active workspace, or None when none is selected."""
        if caller.active_workspace_id is None:
            return None
        return await self.get_workspace_by_id(caller.active_workspace_id)

    def get_active_workspace_id(self, caller: CallerContext) -> int | None:
        return caller.active_workspace_id

    async def get_workspaces_by_user_id_and_by_role(
        self, user_id: int, role: UserRole
    ) -> list[Workspace]:
        """Get the workspaces in which the user holds the given role."""
        async with self._uow_factory() as uow:
            result = await uow.workspaces.get_active_workspace_id_and_role_by_user_id_and_role(
                user_id, to_security_role(role)
            )
            return list(result.assigned_workspaces_to_user)

    def get_user_id_from_user_context(self, caller: CallerContext) -> int:
        """Get the caller's user ID. Anonymous callers are rejected."""
        if caller.user_id is None:
            raise AuthenticationError()
        return caller.user_id

    async def get_workspaces_of_user(
        self,
        caller: CallerContext,
        refresh: CallerRefresh | None = None,
    ) -> list[Workspace]:
        """Get the workspaces available to the caller.

        A caller without a user ID may still be completing login. When
        ``refresh`` is given the context is re-read a bounded number of times
        with exponential backoff; otherwise, or once the attempts run out,
        AuthenticationError is raised.
        """
        user_id = await self._wait_for_login(caller, refresh)
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_workspaces_of_user(user_id)

    def extend_user_assigned_roles(
        self,
        active_workspace_id_and_role: ActiveWorkspaceIdAndRole,
        caller: CallerContext,
    ) -> ActiveWorkspaceIdAndRole:
        """Return a copy whose workspace roles include the caller's implicit global roles.

        Global admins and examinees hold their role in every workspace. The
        given value is left untouched.
        """
        implicit = {r for r in IMPLICIT_WORKSPACE_ROLES if caller.has_global_role(r)}
        if not implicit:
            return active_workspace_id_and_role
        return replace(
            active_workspace_id_and_role,
            assigned_roles_to_workspace=(
                active_workspace_id_and_role.assigned_roles_to_workspace | implicit
            ),
        )

    async def get_roles_of_user_by_workspace(
        self, user_id: int, workspace_id: int
    ) -> set[UserRole]:
        """Get the roles a user holds in a workspace."""
        async with self._uow_factory() as uow:
            rows = await uow.workspaces.get_roles_of_user_by_workspace(user_id, workspace_id)
            return self._roles.transform_user_entity_roles(r.role_name for r in rows)

    async def add_user_to_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> Workspace:
        """Assign a role to a user in a workspace.

        Raises DuplicateRoleAssignmentError if the user already holds the role
        there; nothing is written in that case.
        """
        async with self._uow_factory() as uow:
            rows = await uow.workspaces.get_roles_of_user_by_workspace(user_id, workspace_id)
            existing = self._roles.transform_user_entity_roles(r.role_name for r in rows)
            if role in existing:
                user = await uow.users.get_user_by_user_id(user_id)
                logger.info(
                    "duplicate_role_rejected",
                    workspace_id=workspace_id,
                    user_id=user_id,
                    role=role.value,
                )
                raise DuplicateRoleAssignmentError(user.email, role.value)

            workspace = await uow.workspaces.add_user_to_workspace(workspace_id, user_id, role)
            await uow.commit()
            logger.info(
                "user_added_to_workspace",
                workspace_id=workspace_id,
                user_id=user_id,
                role=role.value,
            )
            return workspace

    async def revoke_user_role(self, user_id: int, role: UserRole) -> None:
        """Revoke a role from a user in every workspace."""
        async with self._uow_factory() as uow:
            await uow.workspaces.revoke_user_role(user_id, role)
            await uow.commit()
        logger.info("user_role_revoked", user_id=user_id, role=role.value)

    async def revoke_user_role_from_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> None:
        """Revoke a user's role in one workspace."""
        async with self._uow_factory() as uow:
            await uow.workspaces.revoke_user_role_from_workspace(workspace_id, user_id, role)
            await uow.commit()
        logger.info(
            "user_role_revoked",
            workspace_id=workspace_id,
            user_id=user_id,
            role=role.value,
        )

    async def save_workspace(self, workspace: Workspace) -> Workspace:
        """Persist a new workspace and return it with its assigned ID."""
        async with self._uow_factory() as uow:
            saved = await uow.workspaces.save(workspace)
            await uow.commit()
        logger.info("workspace_saved", workspace_id=saved.id)
        return saved

    async def update_workspace(self, workspace: Workspace, workspace_id: int) -> Workspace:
        """Update a workspace.

        ``workspace_id`` always wins over any ID already set on ``workspace``.
        """
        workspace.id = workspace_id
        workspace.updated_at = datetime.utcnow()
        async with self._uow_factory() as uow:
            updated = await uow.workspaces.update(workspace)
            await uow.commit()
        logger.info("workspace_updated", workspace_id=workspace_id)
        return updated

    # --- Internal helpers ---

    async def _wait_for_login(
        self, caller: CallerContext, refresh: CallerRefresh | None
    ) -> int:
        attempt = 0
        while caller.user_id is None:
            if refresh is None or attempt >= self._login_wait_attempts:
                logger.warning("caller_not_authenticated", attempts=attempt)
                raise AuthenticationError()
            await asyncio.sleep(self._login_wait_delay(attempt))
            attempt += 1
            caller = await refresh()
        return caller.user_id

    def _login_wait_delay(self, attempt: int) -> float:
        return min(self._login_wait_max, self._login_wait_base * (2**attempt))
