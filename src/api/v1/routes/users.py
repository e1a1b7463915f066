"""User-centric workspace and role routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import Caller, GlobalAdmin
from api.v1.dependencies import get_workspace_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.workspace import WorkspaceListResponse, WorkspaceResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.role import UserRole
from domain.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/{user_id}/workspaces",
    response_model=WorkspaceListResponse,
    summary="List workspaces where a user holds a role",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_user_workspaces_by_role(
    request: Request,
    user_id: int,
    caller: Caller,
    role: UserRole = Query(..., description="Role the user must hold"),
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """Get the workspaces in which the user holds ``role``."""
    workspaces = await service.get_workspaces_by_user_id_and_by_role(user_id, role)
    data = [WorkspaceResponse.model_validate(ws) for ws in workspaces]
    return WorkspaceListResponse(data=data, meta={"total": len(data), "role": role.value})


@router.delete(
    "/{user_id}/roles/{role}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a role from a user in every workspace",
    responses={403: {"model": ErrorResponse, "description": "Global admin role required"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def revoke_user_role(
    request: Request,
    user_id: int,
    role: UserRole,
    caller: GlobalAdmin,
    service: WorkspaceService = Depends(get_workspace_service),
) -> None:
    """Revoke ``role`` from the user across all workspaces."""
    await service.revoke_user_role(user_id, role)
    return None
