"""JWT session token issuance and validation."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from cleanconnect.config import get_settings
from cleanconnect.errors import AuthenticationFailed


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""

    id: str
    role: str
    is_admin: bool = False
    admin_role: str | None = None


class TokenService:
    """Signs and verifies HS256 session tokens.

    Tokens carry ``{id, role, isAdmin, adminRole}`` so requests can be
    authorized without a database lookup.
    """

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        expires_days: int | None = None,
    ):
        """Initialize token service.

        Args:
            secret: Signing secret (defaults to JWT_SECRET setting)
            algorithm: JWS algorithm (defaults to JWT_ALGORITHM setting)
            expires_days: Token lifetime in days (defaults to JWT_EXPIRES_DAYS setting)
        """
        settings = get_settings()
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expires_days = expires_days if expires_days is not None else settings.jwt_expires_days

    def issue(
        self,
        user_id: str,
        role: str,
        is_admin: bool = False,
        admin_role: str | None = None,
        now: datetime | None = None,
    ) -> str:
        """Generate a signed token for an authenticated user.

        Args:
            user_id: User ID
            role: User role (client/cleaner/admin)
            is_admin: Admin flag
            admin_role: Specific admin role (Super, Support, ...)
            now: Issue time (defaults to current UTC time)

        Returns:
            Signed JWT string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": str(user_id),
            "role": role,
            "isAdmin": bool(is_admin),
            "adminRole": admin_role,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expires_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Raises:
            AuthenticationFailed: If the signature, format or expiry is invalid
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise AuthenticationFailed("Not authorized, token failed") from exc

        user_id = payload.get("id")
        role = payload.get("role")
        if not user_id or not role:
            raise AuthenticationFailed("Not authorized, token failed")

        return TokenClaims(
            id=str(user_id),
            role=role,
            is_admin=bool(payload.get("isAdmin", False)),
            admin_role=payload.get("adminRole"),
        )

    @staticmethod
    def extract_token_from_header(authorization: str | None) -> str | None:
        """Extract bearer token from Authorization header.

        Args:
            authorization: Authorization header value

        Returns:
            Token string if valid format, None otherwise
        """
        if not authorization or not authorization.startswith("Bearer "):
            return None

        token = authorization[7:].strip()  # Remove "Bearer " prefix
        return token or None
