"""FastAPI dependencies: access control gate and shared collaborators."""

from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.redis_client import CacheManager, get_redis_client
from app.core.security import verify_session_token
from app.database import get_db
from app.schemas.users import UserRole
from app.services.payment_service import PaymentService
from app.services.user_service import UserService

# Session token sources: the HTTP-only cookie, or a bearer header for API clients
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)
bearer = HTTPBearer(auto_error=False)


async def get_current_identity(
    cookie_token: Annotated[str | None, Depends(session_cookie)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> str:
    """
    Authenticate the caller from the session token.

    Returns:
        Email carried by the verified token

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
    """
    token = cookie_token or (credentials.credentials if credentials else None)
    email = verify_session_token(token)
    structlog.contextvars.bind_contextvars(identity=email)
    return email


async def get_current_user(
    email: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Load the persisted record of the authenticated caller.

    Raises:
        UnauthorizedException: If no user record exists for the identity
    """
    user = await UserService.get_user_by_email(db, email)

    if not user:
        raise UnauthorizedException()

    return user


async def require_admin(
    email: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Authorize an admin-only operation.

    The role is read from the store on every call, never from the token or a cache.

    Raises:
        UnauthorizedException: If the caller has no record or is not an admin
    """
    user = await UserService.get_user_by_email(db, email)

    if not user or user["role"] != UserRole.ADMIN.value:
        raise UnauthorizedException()

    return user


def get_cache_manager() -> CacheManager:
    """Cache manager over the shared Redis client."""
    return CacheManager(get_redis_client())


def get_payment_service() -> PaymentService:
    """Payment gateway adapter."""
    return PaymentService()


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentIdentity = Annotated[str, Depends(get_current_identity)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
AdminUser = Annotated[dict, Depends(require_admin)]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
