"""Role enumerations and the mapping between them.

Two role vocabularies exist:

* ``UserRole`` is what the application stores and reasons about.
* ``SecurityRole`` is what the security context (access tokens,
  ``CallerContext``) carries.

They are translated through an explicit table, never by declaration order.
"""

from enum import StrEnum


class UserRole(StrEnum):
    """Application-level role a user may hold."""

    GLOBAL_ADMIN = "global_admin"
    WORKSPACE_ADMIN = "workspace_admin"
    EXAMINER = "examiner"
    EXAMINEE = "examinee"


class SecurityRole(StrEnum):
    """Role as carried by the security context."""

    ROLE_GLOBAL_ADMIN = "ROLE_GLOBAL_ADMIN"
    ROLE_WORKSPACE_ADMIN = "ROLE_WORKSPACE_ADMIN"
    ROLE_EXAMINER = "ROLE_EXAMINER"
    ROLE_EXAMINEE = "ROLE_EXAMINEE"


_USER_TO_SECURITY_ROLE: dict[UserRole, SecurityRole] = {
    UserRole.GLOBAL_ADMIN: SecurityRole.ROLE_GLOBAL_ADMIN,
    UserRole.WORKSPACE_ADMIN: SecurityRole.ROLE_WORKSPACE_ADMIN,
    UserRole.EXAMINER: SecurityRole.ROLE_EXAMINER,
    UserRole.EXAMINEE: SecurityRole.ROLE_EXAMINEE,
}

_SECURITY_TO_USER_ROLE: dict[SecurityRole, UserRole] = {
    v: k for k, v in _USER_TO_SECURITY_ROLE.items()
}

# Global roles that are implicitly granted inside every workspace.
IMPLICIT_WORKSPACE_ROLES: tuple[SecurityRole, ...] = (
    SecurityRole.ROLE_GLOBAL_ADMIN,
    SecurityRole.ROLE_EXAMINEE,
)


def to_security_role(role: UserRole) -> SecurityRole:
    """Translate an application role into its security-context form."""
    return _USER_TO_SECURITY_ROLE[role]


def to_user_role(role: SecurityRole) -> UserRole:
    """Translate a security-context role into its application form."""
    return _SECURITY_TO_USER_ROLE[role]


def parse_security_roles(values: list[str] | None) -> frozenset[SecurityRole]:
    """Build a role set from raw token claims, ignoring unknown values."""
    known = {r.value for r in SecurityRole}
    return frozenset(SecurityRole(v) for v in values or [] if v in known)
