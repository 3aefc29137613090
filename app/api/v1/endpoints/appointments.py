"""Appointment endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.core.exceptions import ForbiddenException
from app.dependencies import (
    AdminUser,
    CurrentIdentity,
    CurrentUser,
    DatabaseSession,
    PaymentServiceDep,
)
from app.schemas.appointments import AppointmentCreate, AppointmentResponse, AppointmentResult
from app.schemas.users import UserRole
from app.services.booking_service import BookingService
from app.services.capacity_ledger import CapacityLedger
from app.services.user_service import UserService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a test",
)
async def create_appointment(
    data: AppointmentCreate,
    current_user: CurrentUser,
    db: DatabaseSession,
    payments: PaymentServiceDep,
) -> AppointmentResponse:
    """
    Book one slot of a test with an authorized payment.

    Args:
        data: Listing and the payment intent paying for it
        current_user: Authenticated user
        db: Database session
        payments: Payment gateway

    Returns:
        Created appointment
    """
    service = BookingService(db, payments)
    appointment = await service.book(current_user, data.listing_id, data.payment_intent_id)
    return AppointmentResponse.model_validate(appointment)


@router.get(
    "",
    response_model=list[AppointmentResponse],
    summary="Search appointments (admin only)",
)
async def search_appointments(
    db: DatabaseSession,
    admin_user: AdminUser,
    listing_id: UUID | None = Query(None),
    email: str | None = Query(None, description="Partial, case-insensitive email match"),
) -> list[AppointmentResponse]:
    """Search bookings by test and user email."""
    rows = await CapacityLedger(db).search(listing_id, email)
    return [AppointmentResponse.model_validate(row) for row in rows]


@router.get(
    "/{email}",
    response_model=list[AppointmentResponse],
    summary="List a user's appointments",
)
async def list_user_appointments(
    email: str,
    db: DatabaseSession,
    identity: CurrentIdentity,
) -> list[AppointmentResponse]:
    """List the bookings of a user. Callers see their own; admins anyone's."""
    if email != identity:
        caller = await UserService.get_user_by_email(db, identity)
        if not caller or caller["role"] != UserRole.ADMIN.value:
            raise ForbiddenException("Access denied to these appointments")

    rows = await CapacityLedger(db).list_by_user(email)
    return [AppointmentResponse.model_validate(row) for row in rows]


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: UUID,
    db: DatabaseSession,
    identity: CurrentIdentity,
) -> None:
    """Cancel one of the caller's bookings; its slot goes back on sale."""
    await CapacityLedger(db).cancel_appointment(appointment_id, identity)


@router.patch(
    "/{appointment_id}/result",
    response_model=AppointmentResponse,
    summary="Deliver test result (admin only)",
)
async def attach_result(
    appointment_id: UUID,
    data: AppointmentResult,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> AppointmentResponse:
    """Attach the result and mark the appointment delivered."""
    appointment = await CapacityLedger(db).attach_result(appointment_id, data.result)
    return AppointmentResponse.model_validate(appointment)
