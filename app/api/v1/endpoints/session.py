"""Session endpoints."""

from fastapi import APIRouter, Response, status

from app.config import settings
from app.schemas.auth import SessionRequest, SessionResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Open a session",
)
async def open_session(request: SessionRequest, response: Response) -> SessionResponse:
    """
    Issue a signed session token and set it as an HTTP-only cookie.

    The token stays valid until it expires; there is no server-side revocation.
    """
    token = await AuthService.open_session(request)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_token_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        path="/",
    )
    return SessionResponse()


@router.get(
    "/logout",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Clear the session cookie",
)
async def logout(response: Response) -> SessionResponse:
    """Overwrite the session cookie with one that expires immediately."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value="",
        max_age=0,
        expires=0,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        path="/",
    )
    return SessionResponse()
