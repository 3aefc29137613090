"""Tests for user profile and admin role/status endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_upsert_creates_profile(client: AsyncClient, session_headers) -> None:
    """Test the first profile write creates the user with default role and status."""
    headers = session_headers("new@example.com")

    response = await client.put(
        "/api/v1/users/new@example.com",
        json={"name": "New Patient", "blood_group": "O+", "district": "Dhaka"},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["name"] == "New Patient"
    assert data["role"] == "user"
    assert data["status"] == "none"


@pytest.mark.asyncio
async def test_upsert_keeps_existing_profile(
    client: AsyncClient,
    auth_headers: dict,
    test_user: dict,
) -> None:
    """Test a repeated sign-up write leaves the existing record alone."""
    response = await client.put(
        "/api/v1/users/patient@example.com",
        json={"name": "Someone Else"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Test Patient"
    assert response.json()["id"] == str(test_user["id"])


@pytest.mark.asyncio
async def test_upsert_files_status_request(client: AsyncClient, auth_headers: dict) -> None:
    """Test a user may request review of their own record."""
    response = await client.put(
        "/api/v1/users/patient@example.com",
        json={"status": "Requested"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Requested"
    assert response.json()["role"] == "user"


@pytest.mark.asyncio
async def test_upsert_cannot_set_admin_states(client: AsyncClient, auth_headers: dict) -> None:
    """Test statuses other than Requested are reserved for admins."""
    response = await client.put(
        "/api/v1/users/patient@example.com",
        json={"status": "Active"},
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upsert_other_email_forbidden(client: AsyncClient, auth_headers: dict) -> None:
    """Test a caller cannot write another user's profile."""
    response = await client.put(
        "/api/v1/users/other@example.com",
        json={"name": "Hijack"},
        headers=auth_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, auth_headers: dict) -> None:
    """Test updating the caller's own profile fields."""
    response = await client.patch(
        "/api/v1/users/me",
        json={"name": "Updated Name", "upazila": "Savar"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Updated Name"
    assert response.json()["upazila"] == "Savar"
    assert response.json()["blood_group"] is None


@pytest.mark.asyncio
async def test_get_user_visibility(
    client: AsyncClient,
    auth_headers: dict,
    other_headers: dict,
    admin_headers: dict,
) -> None:
    """Test users read their own record; admins read any."""
    response = await client.get("/api/v1/users/patient@example.com", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/users/patient@example.com", headers=other_headers)
    assert response.status_code == 403

    response = await client.get("/api/v1/users/patient@example.com", headers=admin_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/users/missing@example.com", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_users_requires_admin(
    client: AsyncClient,
    auth_headers: dict,
    admin_headers: dict,
) -> None:
    """Test only admins list users."""
    response = await client.get("/api/v1/users", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "unauthorized access"

    response = await client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"patient@example.com", "admin@example.com"}


@pytest.mark.asyncio
async def test_role_change_takes_effect_on_next_request(
    client: AsyncClient,
    auth_headers: dict,
    admin_headers: dict,
    test_user: dict,
) -> None:
    """Test the gate reads the role fresh, so promotion and demotion apply at once."""
    url = f"/api/v1/users/{test_user['id']}/role"

    response = await client.patch(url, json={"role": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    # Same token as before the promotion
    response = await client.get("/api/v1/users", headers=auth_headers)
    assert response.status_code == 200

    response = await client.patch(url, json={"role": "user"}, headers=admin_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/users", headers=auth_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_role_change_rejects_unknown_role(
    client: AsyncClient,
    admin_headers: dict,
    test_user: dict,
) -> None:
    """Test roles outside user/admin are refused."""
    response = await client.patch(
        f"/api/v1/users/{test_user['id']}/role",
        json={"role": "superuser"},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_set_status(
    client: AsyncClient,
    auth_headers: dict,
    admin_headers: dict,
    test_user: dict,
) -> None:
    """Test admins overwrite a user's status; users cannot."""
    url = f"/api/v1/users/{test_user['id']}/status"

    response = await client.patch(url, json={"status": "Active"}, headers=auth_headers)
    assert response.status_code == 401

    response = await client.patch(url, json={"status": "Active"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "Active"

    response = await client.patch(url, json={"status": "Blocked"}, headers=admin_headers)
    assert response.json()["status"] == "Blocked"


@pytest.mark.asyncio
async def test_set_status_unknown_user(client: AsyncClient, admin_headers: dict) -> None:
    """Test changing the status of a user that does not exist."""
    response = await client.patch(
        "/api/v1/users/00000000-0000-0000-0000-000000000000/status",
        json={"status": "Active"},
        headers=admin_headers,
    )
    assert response.status_code == 404
