"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ROLE = "INVALID_ROLE"

    # Conflict errors (409)
    DUPLICATE_ROLE_ASSIGNMENT = "DUPLICATE_ROLE_ASSIGNMENT"
    DATABASE_CONFLICT = "DATABASE_CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed or the caller is anonymous."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class InsufficientPermissionsError(AppException):
    """Caller does not hold the role an operation requires."""

    def __init__(self, required_role: str = "global_admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class WorkspaceNotFoundError(AppException):
    """Workspace not found."""

    def __init__(self, workspace_id: int | str) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_NOT_FOUND,
            message=f"Workspace not found: {workspace_id}",
            status_code=404,
            details={"workspace_id": workspace_id},
        )


class UserNotFoundError(AppException):
    """User not found."""

    def __init__(self, user_id: int | str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class InvalidRoleError(AppException):
    """A stored or requested role name is not a known role."""

    def __init__(self, role_name: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ROLE,
            message=f"Unknown role: {role_name}",
            status_code=400,
            details={"role": role_name},
        )


class DuplicateRoleAssignmentError(AppException):
    """The user already holds the role in the workspace."""

    def __init__(self, email: str, role: str) -> None:
        self.email = email
        self.role = role
        super().__init__(
            error_code=ErrorCode.DUPLICATE_ROLE_ASSIGNMENT,
            message=f"User {email} already has role {role} in this workspace",
            status_code=409,
            details={"email": email, "role": role},
        )
