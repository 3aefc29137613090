"""Booking workflow: payment check, slot reservation, appointment record."""

from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictException,
    OutOfCapacityException,
    PaymentRequiredException,
    StoreFailureException,
)
from app.services.capacity_ledger import CapacityLedger
from app.services.listing_service import ListingService
from app.services.payment_service import PaymentService, to_minor_units

logger = structlog.get_logger(__name__)


class BookingService:
    """
    Books a listing for a user as a sequence of compensated steps.

    1. the listing must exist and still show capacity;
    2. the payment intent must not be spent and must be authorized for the price;
    3. a slot is reserved (voids the payment if none is left or the store fails);
    4. the appointment is recorded (releases the slot, and voids the payment
       unless another booking already owns it, if this fails).
    """

    def __init__(self, db: AsyncSession, payments: PaymentService):
        """Initialize service with database session and payment gateway."""
        self.db = db
        self.payments = payments
        self.ledger = CapacityLedger(db)

    async def _compensate_payment(self, payment_intent_id: str) -> None:
        try:
            await self.payments.void(payment_intent_id)
        except Exception as e:
            # Reported for manual follow-up; the booking error is what the caller sees
            logger.error(
                "booking_payment_compensation_failed",
                payment_intent_id=payment_intent_id,
                error=str(e),
            )

    async def book(self, user: dict, listing_id: UUID, payment_intent_id: str) -> dict:
        """
        Book one slot of a listing.

        Args:
            user: Authenticated user record
            listing_id: Listing to book
            payment_intent_id: Payment intent the client confirmed

        Returns:
            Created appointment

        Raises:
            NotFoundException: If the listing does not exist
            OutOfCapacityException: If the listing is full
            ConflictException: If the payment was already used for a booking
            PaymentRequiredException: If the payment is not authorized for the price
            StoreFailureException: If the appointment could not be recorded
        """
        log = logger.bind(listing_id=str(listing_id), payment_intent_id=payment_intent_id)

        listing = await ListingService.get_listing(self.db, listing_id)
        if listing["slots"] <= 0:
            raise OutOfCapacityException()

        if await self.ledger.get_by_payment_intent(payment_intent_id):
            raise ConflictException("Payment already used for a booking")

        if not await self.payments.is_authorized(
            payment_intent_id, to_minor_units(listing["price"])
        ):
            log.info("booking_rejected_unpaid")
            raise PaymentRequiredException()

        try:
            await self.ledger.reserve_slot(listing_id)
        except OutOfCapacityException:
            log.info("booking_rejected_full")
            await self._compensate_payment(payment_intent_id)
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error("booking_reservation_failed", error=str(e))
            await self._compensate_payment(payment_intent_id)
            raise StoreFailureException("Booking could not be saved, payment released")

        try:
            appointment = await self.ledger.create_appointment(
                listing=listing,
                user_email=user["email"],
                user_name=user.get("name"),
                payment_intent_id=payment_intent_id,
            )
        except IntegrityError:
            await self.db.rollback()
            await self.ledger.release_slot(listing_id)
            log.warning("booking_duplicate_payment")
            raise ConflictException("Payment already used for a booking")
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error("booking_persist_failed", error=str(e))
            await self.ledger.release_slot(listing_id)
            await self._compensate_payment(payment_intent_id)
            raise StoreFailureException("Booking could not be saved, payment released")

        log.info("booking_confirmed", appointment_id=str(appointment["id"]))
        return appointment
