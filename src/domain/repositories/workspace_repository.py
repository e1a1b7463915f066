"""Workspace repository protocol."""

from typing import Protocol

from domain.entities.role import SecurityRole, UserRole
from domain.entities.user import UserEntityRole
from domain.entities.workspace import ActiveWorkspaceIdAndRole, Workspace


class IWorkspaceRepository(Protocol):
    """Repository interface for Workspace entities and role assignments."""

    async def get_all_workspaces(self) -> list[Workspace]:
        """Get every workspace, each exactly once."""
        ...

    async def get_by_id(self, id: int) -> Workspace:
        """Get a workspace by ID. Raises WorkspaceNotFoundError if missing."""
        ...

    async def get_active_workspace_id_and_role_by_user_id_and_role(
        self, user_id: int, role: SecurityRole
    ) -> ActiveWorkspaceIdAndRole:
        """Get the user's active workspace, its roles and the workspaces where the user holds role."""
        ...

    async def get_workspaces_of_user(self, user_id: int) -> list[Workspace]:
        """Get all workspaces the user holds at least one role in."""
        ...

    async def get_roles_of_user_by_workspace(
        self, user_id: int, workspace_id: int
    ) -> list[UserEntityRole]:
        """Get the stored role assignments of a user in a workspace."""
        ...

    async def add_user_to_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> Workspace:
        """Assign a role to a user in a workspace and return the workspace."""
        ...

    async def revoke_user_role(self, user_id: int, role: UserRole) -> None:
        """Remove a role from a user in every workspace."""
        ...

    async def revoke_user_role_from_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> None:
        """Remove a role from a user in one workspace."""
        ...

    async def save(self, workspace: Workspace) -> Workspace:
        """Persist a new workspace."""
        ...

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        ...
