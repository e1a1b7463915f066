"""Workspace API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import Caller, GlobalAdmin
from api.v1.dependencies import get_workspace_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.workspace import (
    ActiveWorkspaceResponse,
    ActiveWorkspaceRolesResponse,
    AddUserRequest,
    CallerContextResponse,
    RoleListResponse,
    WorkspaceCreate,
    WorkspaceDetailResponse,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.role import SecurityRole, UserRole, to_security_role
from domain.entities.workspace import ActiveWorkspaceIdAndRole, Workspace
from domain.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


def _to_response(workspace: Workspace) -> WorkspaceResponse:
    return WorkspaceResponse.model_validate(workspace)


@router.get(
    "",
    response_model=WorkspaceListResponse,
    summary="List all workspaces",
    responses={
        200: {"description": "Every workspace"},
        403: {"model": ErrorResponse, "description": "Global admin role required"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_workspaces(
    request: Request,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """Get every workspace. Requires the global admin role."""
    data = [_to_response(ws) for ws in await service.get_all_workspaces()]
    return WorkspaceListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
    responses={
        201: {"description": "Workspace created successfully"},
        403: {"model": ErrorResponse, "description": "Global admin role required"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_workspace(
    request: Request,
    body: WorkspaceCreate,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Create a new workspace."""
    workspace = await service.save_workspace(
        Workspace(name=body.name, description=body.description)
    )
    return WorkspaceDetailResponse(data=_to_response(workspace))


@router.get(
    "/mine",
    response_model=WorkspaceListResponse,
    summary="List the caller's workspaces",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_workspaces(
    request: Request,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """Get the workspaces in which the caller holds at least one role.

    Bearer tokens always carry a user ID, so the login wait never runs here.
    """
    data = [_to_response(ws) for ws in await service.get_workspaces_of_user(caller)]
    return WorkspaceListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/active",
    response_model=ActiveWorkspaceResponse,
    summary="Get the caller's active workspace",
    responses={404: {"model": ErrorResponse, "description": "Workspace not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_active_workspace(
    request: Request,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> ActiveWorkspaceResponse:
    """Get the active workspace; ``data`` is null when none is selected."""
    workspace = await service.get_active_workspace(caller)
    return ActiveWorkspaceResponse(data=_to_response(workspace) if workspace else None)


@router.get(
    "/active/roles",
    response_model=ActiveWorkspaceRolesResponse,
    summary="Get the caller's roles in the active workspace",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_active_workspace_roles(
    request: Request,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> ActiveWorkspaceRolesResponse:
    """Get the roles held in the active workspace, including implicit global roles."""
    active_id = service.get_active_workspace_id(caller)
    roles: frozenset[SecurityRole] = frozenset()
    if active_id is not None:
        user_id = service.get_user_id_from_user_context(caller)
        held = await service.get_roles_of_user_by_workspace(user_id, active_id)
        roles = frozenset(to_security_role(r) for r in held)

    extended = service.extend_user_assigned_roles(
        ActiveWorkspaceIdAndRole(active_workspace_id=active_id, assigned_roles_to_workspace=roles),
        caller,
    )
    return ActiveWorkspaceRolesResponse(
        active_workspace_id=extended.active_workspace_id,
        assigned_roles=sorted(extended.assigned_roles_to_workspace),
    )


@router.get(
    "/context",
    response_model=CallerContextResponse,
    summary="Get the caller's user and active workspace IDs",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_context(
    request: Request,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> CallerContextResponse:
    """Get the IDs the service resolves for the caller."""
    return CallerContextResponse(
        user_id=service.get_user_id_from_user_context(caller),
        active_workspace_id=service.get_active_workspace_id(caller),
    )


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Get workspace details",
    responses={404: {"model": ErrorResponse, "description": "Workspace not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_workspace(
    request: Request,
    workspace_id: int,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Get a specific workspace by ID."""
    workspace = await service.get_workspace_by_id(workspace_id)
    return WorkspaceDetailResponse(data=_to_response(workspace))


@router.put(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Update workspace",
    responses={
        403: {"model": ErrorResponse, "description": "Global admin role required"},
        404: {"model": ErrorResponse, "description": "Workspace not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_workspace(
    request: Request,
    workspace_id: int,
    body: WorkspaceUpdate,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Replace a workspace's data. The path ID overrides any ID in the body."""
    workspace = await service.update_workspace(
        Workspace(id=body.id, name=body.name, description=body.description),
        workspace_id,
    )
    return WorkspaceDetailResponse(data=_to_response(workspace))


# --- Role assignments ---


@router.get(
    "/{workspace_id}/users/{user_id}/roles",
    response_model=RoleListResponse,
    summary="List a user's roles in a workspace",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_user_roles(
    request: Request,
    workspace_id: int,
    user_id: int,
    caller: Caller,
    service: WorkspaceService = Depends(get_workspace_service),
) -> RoleListResponse:
    """Get the roles a user holds in a workspace."""
    roles = sorted(await service.get_roles_of_user_by_workspace(user_id, workspace_id))
    return RoleListResponse(data=roles, meta={"total": len(roles)})


@router.post(
    "/{workspace_id}/users",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a role to a user in a workspace",
    responses={
        403: {"model": ErrorResponse, "description": "Global admin role required"},
        404: {"model": ErrorResponse, "description": "Workspace or user not found"},
        409: {"model": ErrorResponse, "description": "User already has this role"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_user_to_workspace(
    request: Request,
    workspace_id: int,
    body: AddUserRequest,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Assign a role to a user. Rejects a role the user already holds there."""
    workspace = await service.add_user_to_workspace(workspace_id, body.user_id, body.role)
    return WorkspaceDetailResponse(data=_to_response(workspace))


@router.delete(
    "/{workspace_id}/users/{user_id}/roles/{role}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a user's role in a workspace",
    responses={403: {"model": ErrorResponse, "description": "Global admin role required"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def revoke_user_role_from_workspace(
    request: Request,
    workspace_id: int,
    user_id: int,
    role: UserRole,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> None:
    """Revoke one role from a user in this workspace only."""
    await service.revoke_user_role_from_workspace(workspace_id, user_id, role)
    return None
