"""Authentication service for opening sessions."""

import structlog

from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.firebase import verify_firebase_token
from app.core.security import issue_session_token
from app.schemas.auth import SessionRequest

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for session token issue."""

    @staticmethod
    async def verify_identity_proof(email: str, id_token: str | None) -> None:
        """
        Check that a Firebase ID token belongs to the requested email.

        Raises:
            UnauthorizedException: If the token is missing, invalid or for another email
        """
        if not id_token:
            raise UnauthorizedException()

        try:
            claims = await verify_firebase_token(id_token)
        except ValueError:
            raise UnauthorizedException()

        if str(claims.get("email", "")).lower() != email.lower():
            logger.warning("session_identity_mismatch", email=email)
            raise UnauthorizedException()

    @classmethod
    async def open_session(cls, request: SessionRequest) -> str:
        """
        Issue a session token for the caller.

        Args:
            request: Identity and optional proof

        Returns:
            Signed session token
        """
        if settings.session_require_id_token:
            await cls.verify_identity_proof(request.email, request.id_token)

        token = issue_session_token(request.email)
        logger.info("session_issued", email=request.email)
        return token
