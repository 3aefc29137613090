"""Listing service for diagnostic test CRUD."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.listings import listings
from app.schemas.listings import ListingCreate, ListingUpdate

logger = structlog.get_logger(__name__)


class ListingService:
    """Service for listing operations. Capacity counters are owned by the ledger."""

    @staticmethod
    async def create_listing(db: AsyncSession, data: ListingCreate) -> dict:
        """Create a new listing with no bookings."""
        query = listings.insert().values(**data.model_dump(), booked=0).returning(listings)
        result = await db.execute(query)
        await db.commit()
        listing = dict(result.mappings().one())
        logger.info("listing_created", listing_id=str(listing["id"]))
        return listing

    @staticmethod
    async def get_listing(db: AsyncSession, listing_id: UUID) -> dict:
        """
        Get listing by ID.

        Raises:
            NotFoundException: If listing not found
        """
        result = await db.execute(select(listings).where(listings.c.id == listing_id))
        listing = result.mappings().first()

        if not listing:
            raise NotFoundException("Test not found")

        return dict(listing)

    @staticmethod
    async def list_listings(
        db: AsyncSession,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[dict], int]:
        """List listings with an optional title search, soonest date first."""
        conditions = []
        if search:
            conditions.append(listings.c.title.ilike(f"%{search}%"))

        count_stmt = select(func.count()).select_from(listings).where(*conditions)
        total = (await db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(listings)
            .where(*conditions)
            .order_by(listings.c.date.asc(), listings.c.created_at.desc())
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        result = await db.execute(stmt)
        return [dict(row) for row in result.mappings().all()], total

    @staticmethod
    async def update_listing(db: AsyncSession, listing_id: UUID, data: ListingUpdate) -> dict:
        """
        Replace the editable fields of a listing.

        ``booked`` is left alone; ``slots`` is the new remaining capacity.

        Raises:
            NotFoundException: If listing not found
        """
        query = (
            update(listings)
            .where(listings.c.id == listing_id)
            .values(**data.model_dump(), updated_at=datetime.now(UTC))
            .returning(listings)
        )
        result = await db.execute(query)
        await db.commit()
        listing = result.mappings().first()

        if not listing:
            raise NotFoundException("Test not found")

        logger.info("listing_updated", listing_id=str(listing_id))
        return dict(listing)

    @staticmethod
    async def delete_listing(db: AsyncSession, listing_id: UUID) -> None:
        """
        Delete a listing.

        Raises:
            NotFoundException: If listing not found
        """
        result = await db.execute(delete(listings).where(listings.c.id == listing_id))
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundException("Test not found")

        logger.info("listing_deleted", listing_id=str(listing_id))
