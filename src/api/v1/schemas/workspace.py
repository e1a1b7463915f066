"""Pydantic schemas for Workspace API."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.role import SecurityRole, UserRole


class WorkspaceCreate(BaseModel):
    """Schema for creating a Workspace."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)


class WorkspaceUpdate(BaseModel):
    """Schema for replacing a Workspace's data.

    An ``id`` in the body is accepted but ignored; the path ID is used.
    """

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)


class WorkspaceResponse(BaseModel):
    """Schema for Workspace response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 7,
                "name": "Java Mentoring 2026",
                "description": "Assessments for the spring mentoring programme",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: int
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


class WorkspaceListResponse(BaseModel):
    """Schema for list of Workspaces response."""

    data: List[WorkspaceResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class WorkspaceDetailResponse(BaseModel):
    """Schema for single Workspace response."""

    data: WorkspaceResponse


class ActiveWorkspaceResponse(BaseModel):
    """Schema for the caller's active workspace; ``data`` is null when none is selected."""

    data: Optional[WorkspaceResponse]


class AddUserRequest(BaseModel):
    """Schema for assigning a role to a user in a workspace."""

    user_id: int = Field(..., gt=0)
    role: UserRole


class RoleListResponse(BaseModel):
    """Schema for the roles a user holds in a workspace."""

    data: List[UserRole]
    meta: dict[str, Any] = Field(default_factory=dict)


class ActiveWorkspaceRolesResponse(BaseModel):
    """Schema for the caller's active workspace and the roles held there."""

    active_workspace_id: Optional[int]
    assigned_roles: List[SecurityRole]


class CallerContextResponse(BaseModel):
    """Schema describing who the caller is."""

    user_id: int
    active_workspace_id: Optional[int]
