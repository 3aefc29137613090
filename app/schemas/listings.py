"""Listing schemas for request/response validation."""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class ListingBase(BaseModel):
    """Base listing schema with common fields."""

    title: str = Field(..., min_length=1, max_length=200)
    image: str | None = None
    details: str | None = Field(None, max_length=5000)
    date: dt.date | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    slots: int = Field(..., ge=0)


class ListingCreate(ListingBase):
    """Schema for creating a listing."""


class ListingUpdate(ListingBase):
    """Full replacement of the editable listing fields."""


class ListingResponse(ListingBase):
    """Schema for listing response."""

    id: UUID
    booked: int
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class ListingListResponse(BaseModel):
    """Schema for paginated listing response."""

    total: int
    page: int
    page_size: int
    items: list[ListingResponse]


class SlotReservationResponse(BaseModel):
    """Counters after a slot was reserved."""

    id: UUID
    slots: int
    booked: int
