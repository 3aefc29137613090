"""Location reference data endpoint."""

from fastapi import APIRouter

from app.dependencies import CacheManagerDep, DatabaseSession
from app.schemas.locations import LocationResponse
from app.services.location_service import LocationService

router = APIRouter(tags=["Location"])


@router.get("/location", response_model=LocationResponse, summary="Districts and upazilas")
async def get_locations(db: DatabaseSession, cache_manager: CacheManagerDep) -> LocationResponse:
    """Get every district and upazila."""
    data = await LocationService(cache_manager).get_locations(db)
    return LocationResponse.model_validate(data)
