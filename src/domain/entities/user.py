"""User domain entities."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class User:
    """Domain entity for an application user."""

    id: int
    email: str
    display_name: str | None = None
    active_workspace_id: int | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class UserEntityRole:
    """Persisted assignment of a role to a user within a workspace.

    ``role_name`` is the stored form; use ``UserRoleTransformer`` to turn it
    into a ``UserRole``.
    """

    user_id: int
    workspace_id: int
    role_name: str
