"""User schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User role enumeration."""

    USER = "user"
    ADMIN = "admin"


class UserProfileFields(BaseModel):
    """Profile fields a user may set on their own record."""

    name: str | None = Field(None, max_length=200)
    photo_url: str | None = None
    blood_group: str | None = Field(None, max_length=5)
    district: str | None = Field(None, max_length=100)
    upazila: str | None = Field(None, max_length=100)


class UserUpsert(UserProfileFields):
    """Schema for the first profile write (and status requests)."""

    status: Literal["Requested"] | None = Field(
        None,
        description="Only a request for review may be filed by the user",
    )


class UserUpdate(UserProfileFields):
    """Schema for updating user profile."""


class UserRoleUpdate(BaseModel):
    """Schema for the admin role change."""

    role: UserRole


class UserStatusUpdate(BaseModel):
    """Schema for the admin status change."""

    status: str = Field(..., min_length=1, max_length=50)


class UserResponse(UserProfileFields):
    """User schema for API responses."""

    id: UUID
    email: EmailStr
    role: UserRole
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
