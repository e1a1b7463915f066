"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode, InsufficientPermissionsError
from domain.entities.caller import CallerContext
from domain.entities.role import SecurityRole, parse_security_roles
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)

    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]


async def get_workspace_id_from_header(
    x_workspace_id: Annotated[str | None, Header()] = None,
) -> int | None:
    """Extract workspace ID from X-Workspace-Id header if present."""
    if x_workspace_id:
        try:
            return int(x_workspace_id)
        except ValueError:
            return None
    return None


WorkspaceIdHeader = Annotated[int | None, Depends(get_workspace_id_from_header)]


async def get_caller_context(
    user: CurrentUser,
    workspace_id: WorkspaceIdHeader,
) -> CallerContext:
    """Build the caller context from the token, letting X-Workspace-Id pick the active workspace."""
    return CallerContext(
        user_id=user.id,
        active_workspace_id=workspace_id if workspace_id is not None else user.active_workspace_id,
        global_roles=parse_security_roles(user.roles),
        email=user.email,
    )


Caller = Annotated[CallerContext, Depends(get_caller_context)]


async def require_global_admin(caller: Caller) -> CallerContext:
    """Reject callers that are not global admins."""
    if not caller.has_global_role(SecurityRole.ROLE_GLOBAL_ADMIN):
        raise InsufficientPermissionsError("global_admin")
    return caller


GlobalAdmin = Annotated[CallerContext, Depends(require_global_admin)]
