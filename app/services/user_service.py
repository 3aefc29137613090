"""User service for profile writes and administrative role/status changes."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.users import users
from app.schemas.users import UserRole, UserUpdate, UserUpsert

logger = structlog.get_logger(__name__)


class UserService:
    """Service for user operations."""

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> dict | None:
        """Get user by email."""
        query = select(users).where(users.c.email == email)
        result = await db.execute(query)
        user = result.mappings().first()
        return dict(user) if user else None

    @staticmethod
    async def list_users(db: AsyncSession) -> list[dict]:
        """List every user, newest first."""
        query = select(users).order_by(users.c.created_at.desc())
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @classmethod
    async def upsert_profile(cls, db: AsyncSession, email: str, data: UserUpsert) -> dict:
        """
        Save the profile written at sign-up.

        A new email is inserted. An existing record is returned untouched
        unless the payload files a ``Requested`` status, in which case the
        payload is applied to it.
        """
        values = data.model_dump(exclude_unset=True)
        existing = await cls.get_user_by_email(db, email)

        if existing:
            if data.status != "Requested":
                return existing
            values["updated_at"] = datetime.now(UTC)
            query = (
                update(users).where(users.c.email == email).values(**values).returning(users)
            )
            result = await db.execute(query)
            await db.commit()
            logger.info("user_status_requested", email=email)
            return dict(result.mappings().one())

        try:
            result = await db.execute(
                users.insert().values(email=email, **values).returning(users)
            )
            await db.commit()
        except IntegrityError:
            # Lost a race against a concurrent first write for the same email
            await db.rollback()
            return await cls.upsert_profile(db, email, data)

        logger.info("user_created", email=email)
        return dict(result.mappings().one())

    @staticmethod
    async def update_profile(db: AsyncSession, email: str, data: UserUpdate) -> dict:
        """Update the owner-editable profile fields."""
        values = data.model_dump(exclude_unset=True)
        values["updated_at"] = datetime.now(UTC)

        query = update(users).where(users.c.email == email).values(**values).returning(users)
        result = await db.execute(query)
        await db.commit()
        user = result.mappings().first()

        if not user:
            raise NotFoundException("User not found")

        return dict(user)

    @staticmethod
    async def _set_field(db: AsyncSession, user_id: UUID, **values: str) -> dict:
        query = (
            update(users)
            .where(users.c.id == user_id)
            .values(updated_at=datetime.now(UTC), **values)
            .returning(users)
        )
        result = await db.execute(query)
        await db.commit()
        user = result.mappings().first()

        if not user:
            raise NotFoundException("User not found")

        return dict(user)

    @classmethod
    async def set_role(cls, db: AsyncSession, user_id: UUID, role: UserRole) -> dict:
        """Overwrite a user's role (last write wins)."""
        user = await cls._set_field(db, user_id, role=role.value)
        logger.info("user_role_changed", user_id=str(user_id), role=role.value)
        return user

    @classmethod
    async def set_status(cls, db: AsyncSession, user_id: UUID, status: str) -> dict:
        """Overwrite a user's administrative status (last write wins)."""
        user = await cls._set_field(db, user_id, status=status)
        logger.info("user_status_changed", user_id=str(user_id), status=status)
        return user
