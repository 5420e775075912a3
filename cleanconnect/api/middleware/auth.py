"""Authentication and role-based access dependencies for FastAPI."""

import uuid
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from cleanconnect.errors import AuthenticationFailed
from cleanconnect.models.user import AdminRole
from cleanconnect.services.tokens import TokenService


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller, taken from a verified session token."""

    id: uuid.UUID
    role: str
    is_admin: bool = False
    admin_role: str | None = None

    def has_admin_role(self, *roles: AdminRole) -> bool:
        """True for admins holding one of ``roles``; Super admins hold them all."""
        if not self.is_admin:
            return False
        if self.admin_role == AdminRole.SUPER.value:
            return True
        return self.admin_role in {r.value for r in roles}


class AuthMiddleware:
    """Bearer token authentication using the platform's own JWTs."""

    def __init__(self, token_service: TokenService | None = None):
        """Initialize auth middleware."""
        self._token_service = token_service

    @property
    def token_service(self) -> TokenService:
        # Built lazily so settings overrides made before the first request apply
        if self._token_service is None:
            self._token_service = TokenService()
        return self._token_service

    def reset(self) -> None:
        self._token_service = None

    def _unauthorized(self, message: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    async def verify_token(self, authorization: str | None = Header(None)) -> CurrentUser:
        """Verify the bearer token and extract the caller's identity.

        Args:
            authorization: Authorization header with Bearer token

        Returns:
            The authenticated user

        Raises:
            HTTPException: If the token is missing, malformed or invalid
        """
        token = TokenService.extract_token_from_header(authorization)
        if not token:
            raise self._unauthorized("Not authorized, no token")

        try:
            claims = self.token_service.verify(token)
            user_id = uuid.UUID(claims.id)
        except (AuthenticationFailed, ValueError):
            raise self._unauthorized("Not authorized, token failed") from None

        return CurrentUser(
            id=user_id,
            role=claims.role,
            is_admin=claims.is_admin,
            admin_role=claims.admin_role,
        )


# Global instance
auth_middleware = AuthMiddleware()


async def get_current_user(authorization: str | None = Header(None)) -> CurrentUser:
    """FastAPI dependency for getting current authenticated user.

    Example:
        @router.get("/me")
        async def me(user: CurrentUser = Depends(get_current_user)):
            return {"id": str(user.id)}
    """
    return await auth_middleware.verify_token(authorization)


def require_admin_role(*roles: AdminRole):
    """Build a dependency that admits admins holding one of ``roles``.

    With no roles given, any admin is admitted. Super admins always pass.
    """

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        allowed = user.is_admin if not roles else user.has_admin_role(*roles)
        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized for this admin action",
            )
        return user

    return dependency


require_admin = require_admin_role()
require_super_admin = require_admin_role(AdminRole.SUPER)
require_payment_admin = require_admin_role(AdminRole.PAYMENT)
require_verification_admin = require_admin_role(AdminRole.VERIFICATION)
require_support_admin = require_admin_role(AdminRole.SUPPORT)
