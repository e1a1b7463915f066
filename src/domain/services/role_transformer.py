"""Conversion between stored role names and UserRole."""

from collections.abc import Iterable

from core.exceptions import InvalidRoleError
from domain.entities.role import UserRole

# Map stored role names to UserRole enum
_ROLE_NAME_TO_ENUM = {
    "global_admin": UserRole.GLOBAL_ADMIN,
    "workspace_admin": UserRole.WORKSPACE_ADMIN,
    "examiner": UserRole.EXAMINER,
    "examinee": UserRole.EXAMINEE,
}

_ENUM_TO_ROLE_NAME = {v: k for k, v in _ROLE_NAME_TO_ENUM.items()}

ROLE_NAMES: tuple[str, ...] = tuple(_ROLE_NAME_TO_ENUM)


class UserRoleTransformer:
    """Translate role names as persisted into application roles and back."""

    def transform_user_entity_role(self, role_name: str) -> UserRole:
        """Convert one stored role name. Raises InvalidRoleError if unknown."""
        try:
            return _ROLE_NAME_TO_ENUM[role_name.strip().lower()]
        except KeyError:
            raise InvalidRoleError(role_name) from None

    def transform_user_entity_roles(self, role_names: Iterable[str]) -> set[UserRole]:
        """Convert stored role names into a set; duplicates collapse."""
        return {self.transform_user_entity_role(name) for name in role_names}

    def to_role_name(self, role: UserRole) -> str:
        """Stored name for a role."""
        return _ENUM_TO_ROLE_NAME[role]
