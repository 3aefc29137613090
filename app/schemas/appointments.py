"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    DELIVERED = "delivered"


class AppointmentCreate(BaseModel):
    """Schema for booking a listing."""

    listing_id: UUID
    payment_intent_id: str = Field(..., min_length=1, max_length=255)


class AppointmentResult(BaseModel):
    """Schema for attaching a test result."""

    result: str = Field(..., min_length=1, max_length=2000)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    listing_id: UUID
    user_email: str
    user_name: str | None = None
    listing_title: str
    listing_date: date | None = None
    price: Decimal
    payment_intent_id: str
    status: AppointmentStatus
    result: str | None = None
    booked_at: datetime
    updated_at: datetime
    delivered_at: datetime | None = None

    model_config = {"from_attributes": True}
