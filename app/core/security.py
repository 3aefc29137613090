"""Session token signing and verification."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import SigningError, UnauthorizedException

SESSION_TOKEN_TYPE = "session"


def issue_session_token(
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for an identity.

    Args:
        email: Caller identity embedded as the token subject
        expires_delta: Optional validity window, defaults to the configured days

    Returns:
        Encoded JWT token

    Raises:
        SigningError: If the signing key is unavailable
    """
    if not settings.jwt_secret_key:
        raise SigningError()

    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.session_token_expire_days)

    to_encode: dict[str, Any] = {
        "sub": email,
        "iat": now,
        "exp": now + expires_delta,
        "type": SESSION_TOKEN_TYPE,
    }

    try:
        return jwt.encode(
            to_encode,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    except JWTError as e:
        raise SigningError(f"Failed to sign session token: {e!s}")


def verify_session_token(token: str | None) -> str:
    """
    Verify a session token and return the identity it carries.

    Args:
        token: Encoded JWT token, may be missing

    Returns:
        Email of the authenticated caller

    Raises:
        UnauthorizedException: If the token is missing, malformed, tampered or expired
    """
    if not token:
        raise UnauthorizedException()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise UnauthorizedException()

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise UnauthorizedException()

    email = payload.get("sub")
    if not email or not isinstance(email, str):
        raise UnauthorizedException()

    return email
