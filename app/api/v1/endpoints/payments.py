"""Payment authorization endpoints."""

from fastapi import APIRouter, status

from app.dependencies import CurrentIdentity, PaymentServiceDep
from app.schemas.payments import PaymentAuthorizationRequest, PaymentAuthorizationResponse

router = APIRouter(prefix="/payment-authorizations", tags=["Payments"])


@router.post(
    "",
    response_model=PaymentAuthorizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create payment intent",
)
async def create_payment_authorization(
    data: PaymentAuthorizationRequest,
    payments: PaymentServiceDep,
    identity: CurrentIdentity,
) -> PaymentAuthorizationResponse:
    """
    Create a payment intent for a price and return its client secret.

    The client confirms the payment with the secret, then books with the intent id.
    """
    authorization = await payments.authorize(data.price)
    return PaymentAuthorizationResponse(
        client_secret=authorization.client_secret,
        payment_intent_id=authorization.payment_intent_id,
        amount=authorization.amount_minor,
        currency=authorization.currency,
    )
