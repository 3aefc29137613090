"""Session schemas."""

from pydantic import BaseModel, EmailStr, Field


class SessionRequest(BaseModel):
    """Request to open a session for an identity."""

    email: EmailStr
    id_token: str | None = Field(
        None,
        description="Firebase ID token proving ownership of the email",
    )


class SessionResponse(BaseModel):
    """Outcome of a session call."""

    success: bool = True
