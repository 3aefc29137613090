"""Payment authorization adapter over the Stripe PaymentIntent API."""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

import stripe
import structlog
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.core.exceptions import InvalidAmountException, PaymentGatewayException

logger = structlog.get_logger(__name__)

# Intent states in which the customer's money is secured for us
AUTHORIZED_STATUSES = frozenset({"succeeded", "requires_capture"})


@dataclass(frozen=True)
class PaymentAuthorization:
    """Result of a payment intent creation."""

    client_secret: str
    payment_intent_id: str
    amount_minor: int
    currency: str


def to_minor_units(amount: Decimal | float | str | None) -> int:
    """
    Convert a major-unit price to the gateway's integer minor units.

    Fractions of a minor unit are truncated.

    Raises:
        InvalidAmountException: If the amount is missing or below one minor unit
    """
    if amount is None:
        raise InvalidAmountException("Price is required")

    try:
        minor = (Decimal(str(amount)) * 100).to_integral_value(rounding=ROUND_DOWN)
    except InvalidOperation:
        raise InvalidAmountException()

    if not minor.is_finite() or minor < 1:
        raise InvalidAmountException()

    return int(minor)


class PaymentService:
    """Single-attempt calls to the payment gateway. Nothing is persisted here."""

    def __init__(self, api_key: str | None = None, currency: str | None = None):
        """Initialize with gateway credentials."""
        self.api_key = api_key if api_key is not None else settings.stripe_secret_key
        self.currency = currency or settings.payment_currency

    async def authorize(self, amount: Decimal | float | str | None) -> PaymentAuthorization:
        """
        Create a payment intent for an amount.

        Args:
            amount: Price in major currency units

        Returns:
            Client secret and intent id the client confirms the payment with

        Raises:
            InvalidAmountException: If the amount cannot be charged
            PaymentGatewayException: If the gateway rejects the call
        """
        amount_minor = to_minor_units(amount)

        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount_minor,
                currency=self.currency,
                payment_method_types=["card"],
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("payment_intent_create_failed", amount=amount_minor, error=str(e))
            raise PaymentGatewayException(e.user_message or str(e))

        logger.info("payment_intent_created", payment_intent_id=intent.id, amount=amount_minor)
        return PaymentAuthorization(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            amount_minor=amount_minor,
            currency=self.currency,
        )

    async def _retrieve(self, payment_intent_id: str) -> Any:
        try:
            return await run_in_threadpool(
                stripe.PaymentIntent.retrieve,
                payment_intent_id,
                api_key=self.api_key,
            )
        except stripe.InvalidRequestError as e:
            logger.warning(
                "payment_intent_not_found", payment_intent_id=payment_intent_id, error=str(e)
            )
            return None
        except stripe.StripeError as e:
            raise PaymentGatewayException(e.user_message or str(e))

    async def is_authorized(self, payment_intent_id: str, amount_minor: int) -> bool:
        """Whether the intent exists, is secured and covers exactly the amount."""
        intent = await self._retrieve(payment_intent_id)
        if intent is None:
            return False

        return intent.status in AUTHORIZED_STATUSES and intent.amount == amount_minor

    async def void(self, payment_intent_id: str) -> None:
        """
        Release a payment the booking could not use.

        Uncaptured intents are cancelled, captured ones refunded.

        Raises:
            PaymentGatewayException: If the gateway rejects the call
        """
        intent = await self._retrieve(payment_intent_id)
        if intent is None:
            return

        try:
            if intent.status == "succeeded":
                await run_in_threadpool(
                    stripe.Refund.create,
                    payment_intent=payment_intent_id,
                    api_key=self.api_key,
                )
                logger.info("payment_refunded", payment_intent_id=payment_intent_id)
            elif intent.status != "canceled":
                await run_in_threadpool(
                    stripe.PaymentIntent.cancel,
                    payment_intent_id,
                    api_key=self.api_key,
                )
                logger.info("payment_intent_cancelled", payment_intent_id=payment_intent_id)
        except stripe.StripeError as e:
            logger.error("payment_void_failed", payment_intent_id=payment_intent_id, error=str(e))
            raise PaymentGatewayException(e.user_message or str(e))
