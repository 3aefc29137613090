"""Listing (diagnostic test) endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import AdminUser, DatabaseSession
from app.schemas.listings import (
    ListingCreate,
    ListingListResponse,
    ListingResponse,
    ListingUpdate,
    SlotReservationResponse,
)
from app.services.capacity_ledger import CapacityLedger
from app.services.listing_service import ListingService

router = APIRouter(prefix="/listings", tags=["Listings"])


@router.post(
    "",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add test (admin only)",
)
async def create_listing(
    data: ListingCreate,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> ListingResponse:
    """Add a bookable test."""
    listing = await ListingService.create_listing(db, data)
    return ListingResponse.model_validate(listing)


@router.get("", response_model=ListingListResponse, summary="List tests")
async def list_listings(
    db: DatabaseSession,
    search: str | None = Query(None, description="Search by title"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> ListingListResponse:
    """List bookable tests."""
    rows, total = await ListingService.list_listings(db, search, page, page_size)
    return ListingListResponse(
        total=total,
        page=page,
        page_size=page_size,
        items=[ListingResponse.model_validate(row) for row in rows],
    )


@router.get("/{listing_id}", response_model=ListingResponse, summary="Get test details")
async def get_listing(listing_id: UUID, db: DatabaseSession) -> ListingResponse:
    """Get a single test."""
    listing = await ListingService.get_listing(db, listing_id)
    return ListingResponse.model_validate(listing)


@router.put(
    "/{listing_id}",
    response_model=ListingResponse,
    summary="Update test (admin only)",
)
async def update_listing(
    listing_id: UUID,
    data: ListingUpdate,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> ListingResponse:
    """Replace a test's details."""
    listing = await ListingService.update_listing(db, listing_id, data)
    return ListingResponse.model_validate(listing)


@router.delete(
    "/{listing_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete test (admin only)",
)
async def delete_listing(listing_id: UUID, db: DatabaseSession, admin_user: AdminUser) -> None:
    """Delete a test."""
    await ListingService.delete_listing(db, listing_id)


@router.patch(
    "/{listing_id}/slots",
    response_model=SlotReservationResponse,
    summary="Reserve one slot (admin only)",
)
async def reserve_slot(
    listing_id: UUID,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> SlotReservationResponse:
    """
    Take one slot off a test without a booking, e.g. for a walk-in patient.

    Fails with 409 when no slot is left.
    """
    counters = await CapacityLedger(db).reserve_slot(listing_id)
    return SlotReservationResponse(**counters)
