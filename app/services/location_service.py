"""Location reference data (districts and upazilas)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.redis_client import CacheManager
from app.models.locations import districts, upazilas


class LocationService:
    """Read-only access to location lists, cached in Redis."""

    CACHE_KEY = "location:all"

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize service with optional cache manager."""
        self.cache = cache_manager

    async def get_locations(self, db: AsyncSession) -> dict:
        """Return every district and upazila."""
        if self.cache:
            cached = self.cache.get_json(self.CACHE_KEY)
            if cached:
                return cached

        district_rows = await db.execute(select(districts).order_by(districts.c.name))
        upazila_rows = await db.execute(select(upazilas).order_by(upazilas.c.name))

        data = {
            "districts": [dict(row) for row in district_rows.mappings().all()],
            "upazilas": [dict(row) for row in upazila_rows.mappings().all()],
        }

        if self.cache:
            self.cache.set_json(self.CACHE_KEY, data, ttl=settings.location_cache_ttl)

        return data

    def invalidate(self) -> bool:
        """Drop the cached lists after the reference data was reloaded."""
        if not self.cache:
            return False
        return self.cache.delete(self.CACHE_KEY)
