"""Workspace domain entities."""

from dataclasses import dataclass, field
from datetime import datetime

from domain.entities.role import SecurityRole


@dataclass
class Workspace:
    """Domain entity for a Workspace. ``id`` is assigned by the store."""

    name: str
    id: int | None = None
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True)
class ActiveWorkspaceIdAndRole:
    """A user's active workspace together with the roles held in it.

    ``assigned_workspaces_to_user`` lists the workspaces matched by the query
    that produced this value (for example every workspace in which the user
    holds a given role).
    """

    active_workspace_id: int | None = None
    assigned_roles_to_workspace: frozenset[SecurityRole] = frozenset()
    assigned_workspaces_to_user: tuple[Workspace, ...] = ()
