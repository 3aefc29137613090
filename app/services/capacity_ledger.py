"""Capacity ledger: slot counters and the appointments they back."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, NotFoundException, OutOfCapacityException
from app.models.appointments import appointments
from app.models.listings import listings
from app.schemas.appointments import AppointmentStatus

logger = structlog.get_logger(__name__)


class CapacityLedger:
    """
    Owns the remaining-capacity counter of every listing.

    ``slots`` and ``booked`` are only ever changed together, by a single
    guarded UPDATE, so concurrent reservations cannot oversell a listing
    and no reservation ever drives ``slots`` below zero.
    """

    def __init__(self, db: AsyncSession):
        """Initialize ledger with database session."""
        self.db = db

    async def _listing_exists(self, listing_id: UUID) -> bool:
        result = await self.db.execute(select(listings.c.id).where(listings.c.id == listing_id))
        return result.first() is not None

    async def reserve_slot(self, listing_id: UUID) -> dict:
        """
        Take one slot from a listing.

        Args:
            listing_id: Listing to reserve on

        Returns:
            Listing id with the counters after the reservation

        Raises:
            NotFoundException: If the listing does not exist
            OutOfCapacityException: If no slot is left
        """
        stmt = (
            update(listings)
            .where(listings.c.id == listing_id, listings.c.slots > 0)
            .values(
                slots=listings.c.slots - 1,
                booked=listings.c.booked + 1,
                updated_at=datetime.now(UTC),
            )
            .returning(listings.c.id, listings.c.slots, listings.c.booked)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        await self.db.commit()

        if row is None:
            if not await self._listing_exists(listing_id):
                raise NotFoundException("Test not found")
            logger.info("slot_reservation_rejected", listing_id=str(listing_id))
            raise OutOfCapacityException()

        logger.info(
            "slot_reserved",
            listing_id=str(listing_id),
            slots=row["slots"],
            booked=row["booked"],
        )
        return dict(row)

    def _release_stmt(self, listing_id: UUID):
        return (
            update(listings)
            .where(listings.c.id == listing_id, listings.c.booked > 0)
            .values(
                slots=listings.c.slots + 1,
                booked=listings.c.booked - 1,
                updated_at=datetime.now(UTC),
            )
        )

    async def release_slot(self, listing_id: UUID) -> bool:
        """
        Give one reserved slot back to a listing.

        Returns:
            True if a slot was released
        """
        result = await self.db.execute(self._release_stmt(listing_id))
        await self.db.commit()
        released = result.rowcount > 0  # type: ignore[attr-defined]
        logger.info("slot_released", listing_id=str(listing_id), released=released)
        return released

    async def create_appointment(
        self,
        listing: dict,
        user_email: str,
        user_name: str | None,
        payment_intent_id: str,
    ) -> dict:
        """
        Record a booking against a listing.

        Args:
            listing: Listing row the booking is for
            user_email: Email of the booking user
            user_name: Display name snapshot
            payment_intent_id: Payment that paid for the booking

        Returns:
            Created appointment
        """
        stmt = (
            appointments.insert()
            .values(
                listing_id=listing["id"],
                user_email=user_email,
                user_name=user_name,
                listing_title=listing["title"],
                listing_date=listing["date"],
                price=listing["price"],
                payment_intent_id=payment_intent_id,
                status=AppointmentStatus.PENDING.value,
            )
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        appointment = dict(result.mappings().one())
        logger.info(
            "appointment_created",
            appointment_id=str(appointment["id"]),
            listing_id=str(listing["id"]),
        )
        return appointment

    async def get_appointment(self, appointment_id: UUID) -> dict:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
        """
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def get_by_payment_intent(self, payment_intent_id: str) -> dict | None:
        """Find the appointment a payment was spent on."""
        result = await self.db.execute(
            select(appointments).where(appointments.c.payment_intent_id == payment_intent_id)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def cancel_appointment(self, appointment_id: UUID, user_email: str) -> None:
        """
        Cancel a booking and return its slot to the listing.

        The delete and the slot release commit together.

        Raises:
            NotFoundException: If the appointment does not exist or is not the caller's
            ConflictException: If the result was already delivered
        """
        appointment = await self.get_appointment(appointment_id)

        if appointment["user_email"] != user_email:
            raise NotFoundException("Appointment not found")

        if appointment["status"] == AppointmentStatus.DELIVERED.value:
            raise ConflictException("Delivered appointments cannot be cancelled")

        result = await self.db.execute(
            delete(appointments).where(
                appointments.c.id == appointment_id,
                appointments.c.status != AppointmentStatus.DELIVERED.value,
            )
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            await self.db.rollback()
            raise ConflictException("Appointment changed while cancelling")

        await self.db.execute(self._release_stmt(appointment["listing_id"]))
        await self.db.commit()
        logger.info(
            "appointment_cancelled",
            appointment_id=str(appointment_id),
            listing_id=str(appointment["listing_id"]),
        )

    async def list_by_user(self, user_email: str) -> list[dict]:
        """List a user's appointments, newest first."""
        stmt = (
            select(appointments)
            .where(appointments.c.user_email == user_email)
            .order_by(appointments.c.booked_at.desc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def search(
        self,
        listing_id: UUID | None = None,
        email: str | None = None,
    ) -> list[dict]:
        """
        Search appointments.

        Args:
            listing_id: Only bookings of this listing
            email: Case-insensitive partial match on the booked user's email

        Returns:
            Matching appointments, newest first
        """
        stmt = select(appointments)

        if listing_id:
            stmt = stmt.where(appointments.c.listing_id == listing_id)

        if email:
            stmt = stmt.where(appointments.c.user_email.ilike(f"%{email}%"))

        result = await self.db.execute(stmt.order_by(appointments.c.booked_at.desc()))
        return [dict(row) for row in result.mappings().all()]

    async def attach_result(self, appointment_id: UUID, result_payload: str) -> dict:
        """
        Deliver a test result.

        Re-applying the same result leaves the appointment unchanged.

        Raises:
            NotFoundException: If appointment not found
        """
        now = datetime.now(UTC)
        stmt = (
            update(appointments)
            .where(
                appointments.c.id == appointment_id,
                (appointments.c.status != AppointmentStatus.DELIVERED.value)
                | appointments.c.result.is_distinct_from(result_payload),
            )
            .values(
                status=AppointmentStatus.DELIVERED.value,
                result=result_payload,
                delivered_at=now,
                updated_at=now,
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount:  # type: ignore[attr-defined]
            logger.info("appointment_result_attached", appointment_id=str(appointment_id))

        return await self.get_appointment(appointment_id)
