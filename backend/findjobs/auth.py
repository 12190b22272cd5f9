"""Authentication utilities for the Find Jobs backend.

Identity is a signed JWT carried in an httpOnly cookie. The token payload is
the identity record posted to ``/jwt`` (at minimum an ``email``) plus the
standard ``iat``/``exp`` claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from fastapi import Depends, Request, Response
from jose import JWTError, jwt

from .config import Settings, get_settings
from .errors import Forbidden, InvalidCredential, Unauthorized
from .logging_config import get_logger, log_auth_event

# Cookie name for httpOnly auth
AUTH_COOKIE_NAME = "token"

logger = get_logger("findjobs.auth")


def create_access_token(
    identity: dict[str, Any],
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token for an identity record."""
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.jwt_expire_minutes)

    to_encode = {**identity, "iat": now, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode and validate a JWT token.

    Raises:
        InvalidCredential: if the signature does not verify or the token expired.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise InvalidCredential(str(e)) from e


def cookie_options(settings: Settings) -> dict[str, Any]:
    """Cookie attributes for the auth cookie in the current environment."""
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "strict",
    }


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(AUTH_COOKIE_NAME, token, **cookie_options(settings))


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(AUTH_COOKIE_NAME, **cookie_options(settings))


class AuthContext:
    """Identity resolved from the auth cookie."""

    def __init__(self, email: str, claims: dict | None = None):
        self.email = email
        self.claims = claims or {}

    def __repr__(self) -> str:
        return f"<AuthContext email={self.email!r}>"


async def get_current_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthContext:
    """Resolve the authenticated user from the auth cookie.

    A missing cookie is ``Unauthorized`` (401); a cookie that fails
    verification, or carries no email, is ``Forbidden`` (403).
    """
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token:
        log_auth_event(logger, "verify", None, success=False)
        raise Unauthorized()

    try:
        claims = decode_token(token, settings)
    except InvalidCredential as e:
        logger.info(f"AUTH verify | rejected token: {e}")
        raise Forbidden()

    email = claims.get("email")
    if not email:
        log_auth_event(logger, "verify", None, success=False)
        raise Forbidden()

    auth = AuthContext(email=email, claims=claims)
    request.state.user = auth
    return auth


def require_same_email(auth: AuthContext, email: str) -> None:
    """Reject requests for another user's resources."""
    if auth.email != email:
        log_auth_event(logger, f"email-mismatch path={email}", auth.email, success=False)
        raise Forbidden()


def require_owner(auth: AuthContext, document: dict | None) -> None:
    """Reject writes to a document whose buyer is not the caller.

    Documents that do not exist pass; callers decide what a miss means.
    """
    if document is None:
        return
    owner = (document.get("buyer") or {}).get("email")
    if owner != auth.email:
        log_auth_event(logger, f"owner-mismatch owner={owner}", auth.email, success=False)
        raise Forbidden()


# Type alias for dependency injection
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
