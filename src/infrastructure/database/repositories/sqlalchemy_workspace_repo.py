"""SQLAlchemy implementation of Workspace repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import UserNotFoundError, WorkspaceNotFoundError
from domain.entities.role import SecurityRole, UserRole, to_security_role, to_user_role
from domain.entities.user import UserEntityRole
from domain.entities.workspace import ActiveWorkspaceIdAndRole, Workspace
from domain.services.role_transformer import UserRoleTransformer
from infrastructure.database.models import UserModel, UserWorkspaceRoleModel, WorkspaceModel


class SQLAlchemyWorkspaceRepository:
    """SQLAlchemy implementation of IWorkspaceRepository."""

    def __init__(
        self, session: AsyncSession, role_transformer: UserRoleTransformer | None = None
    ) -> None:
        self._session = session
        self._roles = role_transformer or UserRoleTransformer()

    async def get_all_workspaces(self) -> list[Workspace]:
        """Get every workspace ordered by ID."""
        stmt = select(WorkspaceModel).order_by(WorkspaceModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_id(self, id: int) -> Workspace:
        """Get a workspace by ID."""
        return self._to_entity(await self._get_model(id))

    async def get_active_workspace_id_and_role_by_user_id_and_role(
        self, user_id: int, role: SecurityRole
    ) -> ActiveWorkspaceIdAndRole:
        """Get the user's active workspace and roles there, plus every workspace with role."""
        user = await self._session.get(UserModel, user_id)
        if not user:
            raise UserNotFoundError(user_id)

        role_name = self._roles.to_role_name(to_user_role(role))
        stmt = (
            select(WorkspaceModel)
            .join(
                UserWorkspaceRoleModel,
                UserWorkspaceRoleModel.workspace_id == WorkspaceModel.id,
            )
            .where(
                UserWorkspaceRoleModel.user_id == user_id,
                UserWorkspaceRoleModel.role_name == role_name,
            )
            .distinct()
            .order_by(WorkspaceModel.id)
        )
        result = await self._session.execute(stmt)
        workspaces = tuple(self._to_entity(model) for model in result.scalars())

        active_roles: frozenset[SecurityRole] = frozenset()
        if user.active_workspace_id is not None:
            rows = await self.get_roles_of_user_by_workspace(user_id, user.active_workspace_id)
            active_roles = frozenset(
                to_security_role(self._roles.transform_user_entity_role(r.role_name))
                for r in rows
            )

        return ActiveWorkspaceIdAndRole(
            active_workspace_id=user.active_workspace_id,
            assigned_roles_to_workspace=active_roles,
            assigned_workspaces_to_user=workspaces,
        )

    async def get_workspaces_of_user(self, user_id: int) -> list[Workspace]:
        """Get all workspaces a user holds at least one role in."""
        stmt = (
            select(WorkspaceModel)
            .join(
                UserWorkspaceRoleModel,
                UserWorkspaceRoleModel.workspace_id == WorkspaceModel.id,
            )
            .where(UserWorkspaceRoleModel.user_id == user_id)
            .distinct()
            .order_by(WorkspaceModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_roles_of_user_by_workspace(
        self, user_id: int, workspace_id: int
    ) -> list[UserEntityRole]:
        """Get the stored role assignments of a user in a workspace."""
        stmt = (
            select(UserWorkspaceRoleModel)
            .where(
                UserWorkspaceRoleModel.user_id == user_id,
                UserWorkspaceRoleModel.workspace_id == workspace_id,
            )
            .order_by(UserWorkspaceRoleModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._role_to_entity(model) for model in result.scalars()]

    async def add_user_to_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> Workspace:
        """Assign a role to a user in a workspace. Both must exist."""
        workspace = await self._get_model(workspace_id)
        if not await self._session.get(UserModel, user_id):
            raise UserNotFoundError(user_id)
        self._session.add(
            UserWorkspaceRoleModel(
                user_id=user_id,
                workspace_id=workspace_id,
                role_name=self._roles.to_role_name(role),
            )
        )
        await self._session.flush()
        return self._to_entity(workspace)

    async def revoke_user_role(self, user_id: int, role: UserRole) -> None:
        """Remove a role from a user in every workspace."""
        stmt = delete(UserWorkspaceRoleModel).where(
            UserWorkspaceRoleModel.user_id == user_id,
            UserWorkspaceRoleModel.role_name == self._roles.to_role_name(role),
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def revoke_user_role_from_workspace(
        self, workspace_id: int, user_id: int, role: UserRole
    ) -> None:
        """Remove a role from a user in one workspace."""
        stmt = delete(UserWorkspaceRoleModel).where(
            UserWorkspaceRoleModel.workspace_id == workspace_id,
            UserWorkspaceRoleModel.user_id == user_id,
            UserWorkspaceRoleModel.role_name == self._roles.to_role_name(role),
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def save(self, workspace: Workspace) -> Workspace:
        """Persist a new workspace. The store assigns the ID."""
        model = WorkspaceModel(
            name=workspace.name,
            description=workspace.description,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        if workspace.id is None:
            raise ValueError("Cannot update a workspace without an ID")
        model = await self._get_model(workspace.id)

        model.name = workspace.name
        model.description = workspace.description
        model.updated_at = workspace.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def _get_model(self, id: int) -> WorkspaceModel:
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            raise WorkspaceNotFoundError(id)
        return model

    def _to_entity(self, model: WorkspaceModel) -> Workspace:
        """Convert ORM model to domain entity."""
        return Workspace(
            id=model.id,
            name=model.name,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _role_to_entity(self, model: UserWorkspaceRoleModel) -> UserEntityRole:
        """Convert role assignment ORM model to domain entity."""
        return UserEntityRole(
            user_id=model.user_id,
            workspace_id=model.workspace_id,
            role_name=model.role_name,
        )
