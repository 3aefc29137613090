"""User endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from app.core.exceptions import ForbiddenException, NotFoundException
from app.dependencies import AdminUser, CurrentIdentity, CurrentUser, DatabaseSession
from app.schemas.users import (
    UserResponse,
    UserRole,
    UserRoleUpdate,
    UserStatusUpdate,
    UserUpdate,
    UserUpsert,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserResponse], summary="List all users (admin only)")
async def list_users(db: DatabaseSession, admin_user: AdminUser) -> list[UserResponse]:
    """Get every user."""
    rows = await UserService.list_users(db)
    return [UserResponse.model_validate(row) for row in rows]


@router.patch("/me", response_model=UserResponse, summary="Update own profile")
async def update_current_user_profile(
    user_data: UserUpdate,
    db: DatabaseSession,
    current_user: CurrentUser,
) -> UserResponse:
    """Update name, photo, blood group and address of the caller."""
    user = await UserService.update_profile(db, current_user["email"], user_data)
    return UserResponse.model_validate(user)


@router.get("/{email}", response_model=UserResponse, summary="Get user by email")
async def get_user(email: str, db: DatabaseSession, identity: CurrentIdentity) -> UserResponse:
    """Get a user record. Callers may read their own record; admins any record."""
    if email != identity:
        caller = await UserService.get_user_by_email(db, identity)
        if not caller or caller["role"] != UserRole.ADMIN.value:
            raise ForbiddenException("Access denied to this user")

    user = await UserService.get_user_by_email(db, email)
    if not user:
        raise NotFoundException("User not found")

    return UserResponse.model_validate(user)


@router.put("/{email}", response_model=UserResponse, summary="Save profile on sign-up")
async def upsert_user(
    email: str,
    user_data: UserUpsert,
    db: DatabaseSession,
    identity: CurrentIdentity,
) -> UserResponse:
    """
    Create the caller's record on first write.

    An existing record is returned as is, unless the payload requests review.
    """
    if email != identity:
        raise ForbiddenException("Cannot write another user's profile")

    user = await UserService.upsert_profile(db, email, user_data)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}/status",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Change user status (admin only)",
)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> UserResponse:
    """Overwrite a user's status."""
    user = await UserService.set_status(db, user_id, data.status)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Change user role (admin only)",
)
async def update_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    db: DatabaseSession,
    admin_user: AdminUser,
) -> UserResponse:
    """Overwrite a user's role."""
    user = await UserService.set_role(db, user_id, data.role)
    return UserResponse.model_validate(user)
