"""JWT issuing, verification and route gates.

Every request is evaluated from the signed token alone:

- no token, or a token that fails verification -> anonymous
- a verified token -> authenticated user
- gates then check the admin flag or ownership of the targeted username

Anonymous callers hitting a gate get UnauthorizedError (401); authenticated
callers failing a gate's predicate get ForbiddenError (403).
"""

import logging
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field

from jobly.core.config import get_settings
from jobly.core.errors import ForbiddenError, UnauthorizedError
from jobly.utils.clock import utc_timestamp

logger = logging.getLogger(__name__)

INVALID_OR_EXPIRED_TOKEN_MSG = "Invalid or expired token"

_optional_security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """Claims carried by a verified token."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    is_admin: bool = Field(default=False, alias="isAdmin")

    def can_access(self, username: str) -> bool:
        return self.is_admin or self.username == username


def create_token(user: dict[str, Any]) -> str:
    """Sign a token for `user` (expects `username` and optionally `isAdmin`)."""
    settings = get_settings().security
    issued_at = utc_timestamp()
    payload: dict[str, Any] = {
        "username": user["username"],
        "isAdmin": bool(user.get("isAdmin", False)),
        "iat": issued_at,
    }
    if settings.token_ttl_seconds:
        payload["exp"] = issued_at + settings.token_ttl_seconds
    return jwt.encode(
        payload,
        settings.secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str) -> AuthenticatedUser:
    """Verify a token signature and return its claims.

    Raises UnauthorizedError when the token is malformed, expired or signed
    with another key.
    """
    settings = get_settings().security
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG) from e

    if "username" not in payload:
        raise UnauthorizedError(INVALID_OR_EXPIRED_TOKEN_MSG)
    return AuthenticatedUser.model_validate(payload)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_optional_security),
) -> AuthenticatedUser | None:
    """Return the caller's claims, or None for anonymous callers.

    An invalid token is not an error here; it leaves the caller anonymous.
    """
    if credentials is None:
        return None
    try:
        return verify_token(credentials.credentials)
    except UnauthorizedError:
        return None


def require_logged_in(
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> AuthenticatedUser:
    if user is None:
        raise UnauthorizedError()
    return user


def require_admin(
    user: AuthenticatedUser = Depends(require_logged_in),
) -> AuthenticatedUser:
    if not user.is_admin:
        logger.warning(f"Access denied - user {user.username} is not an admin")
        raise ForbiddenError()
    return user


def require_admin_or_self(
    username: str,
    user: AuthenticatedUser = Depends(require_logged_in),
) -> AuthenticatedUser:
    """Allow admins, or the user named by the `username` path parameter."""
    if not user.can_access(username):
        logger.warning(
            f"Access denied - user {user.username} cannot access {username}",
        )
        raise ForbiddenError()
    return user


CurrentUser = Annotated[AuthenticatedUser | None, Depends(get_current_user)]
RequireLoggedIn = Annotated[AuthenticatedUser, Depends(require_logged_in)]
RequireAdmin = Annotated[AuthenticatedUser, Depends(require_admin)]
RequireAdminOrSelf = Annotated[AuthenticatedUser, Depends(require_admin_or_self)]
