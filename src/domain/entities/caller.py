"""Caller context passed explicitly into services."""

from dataclasses import dataclass

from domain.entities.role import SecurityRole


@dataclass(frozen=True)
class CallerContext:
    """Identity of the user on whose behalf a service call runs.

    ``user_id`` is None for a caller that has not (yet) authenticated.
    ``global_roles`` are the roles granted outside any workspace.
    """

    user_id: int | None
    active_workspace_id: int | None = None
    global_roles: frozenset[SecurityRole] = frozenset()
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_global_role(self, role: SecurityRole) -> bool:
        return role in self.global_roles
