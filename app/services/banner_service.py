"""Banner service: uploads and the single-active-banner rule."""

from uuid import UUID

import structlog
from sqlalchemy import case, delete, false, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.banners import banners
from app.schemas.banners import BannerCreate

logger = structlog.get_logger(__name__)


class BannerService:
    """Service for banner operations."""

    @staticmethod
    async def get_banner(db: AsyncSession, banner_id: UUID) -> dict:
        """
        Get banner by ID.

        Raises:
            NotFoundException: If banner not found
        """
        result = await db.execute(select(banners).where(banners.c.id == banner_id))
        banner = result.mappings().first()

        if not banner:
            raise NotFoundException("Banner not found")

        return dict(banner)

    @staticmethod
    async def list_banners(db: AsyncSession, active_only: bool = False) -> list[dict]:
        """List banners, newest first."""
        stmt = select(banners).order_by(banners.c.created_at.desc())
        if active_only:
            stmt = stmt.where(banners.c.is_active.is_(True))

        result = await db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    @classmethod
    async def create_banner(cls, db: AsyncSession, data: BannerCreate) -> dict:
        """Upload a banner. An active upload takes over from the current one."""
        values = data.model_dump(exclude={"is_active"})
        result = await db.execute(
            banners.insert().values(**values, is_active=False).returning(banners)
        )
        await db.commit()
        banner = dict(result.mappings().one())
        logger.info("banner_created", banner_id=str(banner["id"]))

        if data.is_active:
            return await cls.set_active(db, banner["id"], True)

        return banner

    @classmethod
    async def set_active(cls, db: AsyncSession, banner_id: UUID, is_active: bool) -> dict:
        """
        Set a banner's flag and clear it on every other banner.

        Runs as one transaction: all banner rows are locked in id order,
        then a single UPDATE writes every flag. Concurrent calls therefore
        apply one after another and the last one decides which banner,
        if any, is active.

        Raises:
            NotFoundException: If banner not found
        """
        try:
            locked = await db.execute(
                select(banners.c.id).order_by(banners.c.id).with_for_update()
            )
            if banner_id not in {row.id for row in locked}:
                raise NotFoundException("Banner not found")

            await db.execute(
                update(banners).values(
                    is_active=case(
                        (banners.c.id == banner_id, is_active),
                        else_=false(),
                    )
                )
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("banner_activation_set", banner_id=str(banner_id), is_active=is_active)
        return await cls.get_banner(db, banner_id)

    @classmethod
    async def deactivate(cls, db: AsyncSession, banner_id: UUID) -> dict:
        """Turn a banner off."""
        return await cls.set_active(db, banner_id, False)

    @staticmethod
    async def delete_banner(db: AsyncSession, banner_id: UUID) -> None:
        """
        Delete a banner.

        Raises:
            NotFoundException: If banner not found
        """
        result = await db.execute(delete(banners).where(banners.c.id == banner_id))
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundException("Banner not found")

        logger.info("banner_deleted", banner_id=str(banner_id))
