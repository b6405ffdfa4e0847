import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_admin_creates_and_lists_users(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/users",
        json={
            "email": "coord.first@college.edu",
            "full_name": "First Coordinator",
            "password": "secret123",
            "role": "first_year_coordinator",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["role_label"] == "First Year Coordinator"

    users = (await client.get("/api/v1/users", headers=admin_headers)).json()["users"]
    assert "coord.first@college.edu" in [u["email"] for u in users]


@pytest.mark.asyncio
async def test_unknown_role_rejected(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/users",
        json={"email": "x@college.edu", "full_name": "X", "password": "secret123", "role": "coach"},
        headers=admin_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(client: AsyncClient, admin_user, admin_headers):
    response = await client.patch(
        f"/api/v1/users/{admin_user.id}", json={"is_active": False}, headers=admin_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_changes_coordinator_year(
    client: AsyncClient, admin_headers, second_year_coordinator, coordinator_headers
):
    response = await client.patch(
        f"/api/v1/users/{second_year_coordinator.id}",
        json={"role": "third_year_coordinator"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    me = (await client.get("/api/v1/me", headers=coordinator_headers)).json()
    assert me["year"] == "third"


@pytest.mark.asyncio
async def test_coordinator_cannot_list_users(client: AsyncClient, coordinator_headers):
    response = await client.get("/api/v1/users", headers=coordinator_headers)

    assert response.status_code == 403
