"""Payment authorization schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field


class PaymentAuthorizationRequest(BaseModel):
    """Amount to authorize, in major currency units."""

    price: Decimal | None = Field(None, description="Price of the test being booked")


class PaymentAuthorizationResponse(BaseModel):
    """Client-usable authorization returned by the gateway."""

    client_secret: str
    payment_intent_id: str
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str
