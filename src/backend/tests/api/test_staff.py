"""
Tests for staff session endpoints.
"""

import pytest
from httpx import AsyncClient

STAFF_PASSWORD = "test-staff-pass"


@pytest.mark.integration
class TestStaffSession:
    async def test_not_staff_by_default(self, client: AsyncClient) -> None:
        response = await client.get("/api/staff/session")
        assert response.json() == {"staff": False}

    async def test_wrong_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/staff/login", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        assert "set-cookie" not in response.headers
        assert (await client.get("/api/staff/session")).json() == {"staff": False}

    async def test_missing_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/staff/login", json={})
        assert response.status_code == 401

    async def test_login_sets_http_only_cookie(self, client: AsyncClient) -> None:
        response = await client.post("/api/staff/login", json={"password": f"  {STAFF_PASSWORD} "})

        assert response.status_code == 200
        assert response.json() == {"staff": True}
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("staff=")
        assert "HttpOnly" in cookie
        assert "Max-Age=28800" in cookie

        assert (await client.get("/api/staff/session")).json() == {"staff": True}

    async def test_logout(self, staff_client: AsyncClient) -> None:
        response = await staff_client.post("/api/staff/logout")

        assert response.json() == {"staff": False}
        assert (await staff_client.get("/api/staff/session")).json() == {"staff": False}
