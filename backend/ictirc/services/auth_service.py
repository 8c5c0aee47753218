"""Authentication service for Supabase JWT verification."""

from dataclasses import dataclass
from typing import Optional

import jwt

from ictirc.exceptions import InvalidTokenError, MissingTokenError
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class AuthenticatedUser:
    """Identity extracted from a verified Supabase access token."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class AuthService:
    """Verifies HS256 access tokens signed with the project's JWT secret."""

    def __init__(self, jwt_secret: str, audience: str = "authenticated") -> None:
        self._jwt_secret = jwt_secret
        self._audience = audience

    async def verify_token(self, authorization_header: Optional[str]) -> AuthenticatedUser:
        """
        Verify a Supabase JWT and extract the user identity.

        Args:
            authorization_header: The Authorization header value (Bearer <token>)

        Returns:
            AuthenticatedUser with the auth-issued id and email

        Raises:
            MissingTokenError: If no token is provided
            InvalidTokenError: If token is invalid or expired
        """
        if not authorization_header:
            raise MissingTokenError()

        parts = authorization_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise InvalidTokenError("Invalid authorization header format")

        token = parts[1]

        if not self._jwt_secret:
            log.error("token verification unavailable, jwt secret not configured")
            raise InvalidTokenError("Token verification failed")

        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=["HS256"],
                audience=self._audience,
                options={"verify_exp": True, "verify_iat": True, "verify_nbf": True},
            )
        except jwt.ExpiredSignatureError:
            log.warning("token expired")
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            log.warning("token invalid", error=str(e))
            raise InvalidTokenError(f"Token validation failed: {str(e)}")

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError("Token missing user identifier")

        metadata = payload.get("user_metadata") or {}
        email = payload.get("email")
        name = metadata.get("full_name") or metadata.get("name")

        log.debug("token verified", user_id=user_id, email=email)
        return AuthenticatedUser(id=user_id, email=email, name=name)


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        from ictirc.config import get_settings

        settings = get_settings()
        _auth_service = AuthService(
            jwt_secret=settings.supabase_jwt_secret,
            audience=settings.supabase_jwt_audience,
        )
    return _auth_service
