"""Tests for banner endpoints and the single-active-banner rule."""

import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.banners import banners
from app.schemas.banners import BannerCreate
from app.services.banner_service import BannerService


def banner_payload(name: str, is_active: bool = False) -> dict:
    return {
        "name": name,
        "title": f"{name} offer",
        "image": f"https://img.example.com/{name}.png",
        "coupon_code": name.upper(),
        "discount_rate": 15,
        "is_active": is_active,
    }


async def create(client: AsyncClient, headers: dict, name: str, is_active: bool = False) -> dict:
    response = await client.post("/api/v1/banners", json=banner_payload(name, is_active), headers=headers)
    assert response.status_code == 201
    return response.json()


async def active_ids(db_session) -> set[str]:
    result = await db_session.execute(select(banners.c.id).where(banners.c.is_active.is_(True)))
    return {str(row.id) for row in result}


@pytest.mark.asyncio
async def test_create_banner_inactive_by_default(client: AsyncClient, admin_headers: dict) -> None:
    """Test a new banner is stored switched off."""
    banner = await create(client, admin_headers, "winter")

    assert banner["is_active"] is False
    assert banner["coupon_code"] == "WINTER"


@pytest.mark.asyncio
async def test_banner_writes_require_admin(client: AsyncClient, auth_headers: dict) -> None:
    """Test non-admins cannot upload banners."""
    response = await client.post("/api/v1/banners", json=banner_payload("x"), headers=auth_headers)
    assert response.status_code == 401

    response = await client.post("/api/v1/banners", json=banner_payload("x"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_activation_is_exclusive(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """Test activating a banner switches every other one off; the last write wins."""
    first = await create(client, admin_headers, "first")
    second = await create(client, admin_headers, "second")

    response = await client.patch(
        f"/api/v1/banners/{first['id']}",
        json={"is_active": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is True

    response = await client.patch(
        f"/api/v1/banners/{second['id']}",
        json={"is_active": True},
        headers=admin_headers,
    )
    assert response.status_code == 200

    assert await active_ids(db_session) == {second["id"]}

    response = await client.get("/api/v1/banners", params={"active": True})
    assert [b["id"] for b in response.json()] == [second["id"]]


@pytest.mark.asyncio
async def test_create_active_banner_takes_over(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """Test uploading an active banner replaces the current one."""
    await create(client, admin_headers, "old", is_active=True)
    new = await create(client, admin_headers, "new", is_active=True)

    assert new["is_active"] is True
    assert await active_ids(db_session) == {new["id"]}


@pytest.mark.asyncio
async def test_deactivate_leaves_no_active_banner(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """Test switching the active banner off."""
    banner = await create(client, admin_headers, "promo", is_active=True)

    response = await client.patch(
        f"/api/v1/banners/{banner['id']}",
        json={"is_active": False},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert await active_ids(db_session) == set()


@pytest.mark.asyncio
async def test_concurrent_activations_leave_one_active(session_factory, db_session) -> None:
    """
    Test simultaneous activations of different banners.

    Two independent writes (turn X on, then turn the others off) could
    interleave into two active banners; the combined update must not.
    """
    async with session_factory() as session:
        created = [
            await BannerService.create_banner(
                session,
                BannerCreate(**banner_payload(f"banner-{i}")),
            )
            for i in range(5)
        ]

    async def activate(banner_id):
        async with session_factory() as session:
            return await BannerService.set_active(session, banner_id, True)

    await asyncio.gather(*(activate(b["id"]) for b in created))

    result = await db_session.execute(
        select(func.count()).select_from(banners).where(banners.c.is_active.is_(True))
    )
    assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_set_active_unknown_banner(client: AsyncClient, admin_headers: dict) -> None:
    """Test activating a banner that does not exist."""
    response = await client.patch(
        "/api/v1/banners/00000000-0000-0000-0000-000000000000",
        json={"is_active": True},
        headers=admin_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_banner(client: AsyncClient, admin_headers: dict) -> None:
    """Test deleting a banner."""
    banner = await create(client, admin_headers, "gone")

    response = await client.delete(f"/api/v1/banners/{banner['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.delete(f"/api/v1/banners/{banner['id']}", headers=admin_headers)
    assert response.status_code == 404

    response = await client.get("/api/v1/banners")
    assert response.json() == []
