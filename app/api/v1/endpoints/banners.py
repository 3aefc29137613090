"""Banner endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from app.dependencies import AdminUser, DatabaseSession
from app.schemas.banners import BannerActivation, BannerCreate, BannerResponse
from app.services.banner_service import BannerService

router = APIRouter(prefix="/banners", tags=["Banners"])


@router.post(
    "",
    response_model=BannerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload banner (admin only)",
)
async def create_banner(
    data: BannerCreate,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> BannerResponse:
    """Upload a promotional banner."""
    banner = await BannerService.create_banner(db, data)
    return BannerResponse.model_validate(banner)


@router.get("", response_model=list[BannerResponse], summary="List banners")
async def list_banners(
    db: DatabaseSession,
    active: bool = Query(False, description="Only return the active banner"),
) -> list[BannerResponse]:
    """List banners."""
    rows = await BannerService.list_banners(db, active_only=active)
    return [BannerResponse.model_validate(row) for row in rows]


@router.patch(
    "/{banner_id}",
    response_model=BannerResponse,
    summary="Activate or deactivate banner (admin only)",
)
async def set_banner_active(
    banner_id: UUID,
    data: BannerActivation,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> BannerResponse:
    """Set the banner's active flag; every other banner is deactivated."""
    banner = await BannerService.set_active(db, banner_id, data.is_active)
    return BannerResponse.model_validate(banner)


@router.delete(
    "/{banner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete banner (admin only)",
)
async def delete_banner(banner_id: UUID, db: DatabaseSession, admin_user: AdminUser) -> None:
    """Delete a banner."""
    await BannerService.delete_banner(db, banner_id)
