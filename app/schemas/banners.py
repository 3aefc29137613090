"""Banner schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class BannerCreate(BaseModel):
    """Schema for uploading a banner."""

    name: str = Field(..., min_length=1, max_length=200)
    title: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=1000)
    image: str = Field(..., min_length=1)
    coupon_code: str | None = Field(None, max_length=50)
    discount_rate: int | None = Field(None, ge=0, le=100)
    is_active: bool = False


class BannerActivation(BaseModel):
    """Schema for toggling the active banner."""

    is_active: bool


class BannerResponse(BaseModel):
    """Schema for banner response."""

    id: UUID
    name: str
    title: str | None = None
    description: str | None = None
    image: str
    coupon_code: str | None = None
    discount_rate: int | None = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
