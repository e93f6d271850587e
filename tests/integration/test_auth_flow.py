"""Integration tests for the auth flow (requires running PG + Redis).

Run: pytest tests/integration -m integration -v
"""

import pytest
from httpx import AsyncClient

from src.bo_gateway.staff.db_models import StaffModel
from tests.integration.conftest import PASSWORD, login_headers

# All tests in this module share the session-scoped event loop so that the
# module-level SQLAlchemy async engine pool stays alive across tests.
pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.integration]

Session = tuple[StaffModel, dict[str, str]]


class TestLogin:
    async def test_login_returns_tokens_and_profile(
        self, client: AsyncClient, admin: Session
    ) -> None:
        staff, _ = admin
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": staff.email.upper(), "password": PASSWORD},
            headers={"X-Forwarded-For": "192.0.2.10"},
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["token_type"] == "Bearer"
        assert data["staff"]["email"] == staff.email
        assert data["staff"]["last_login"] is not None

    async def test_wrong_password(self, client: AsyncClient, admin: Session) -> None:
        staff, _ = admin
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": staff.email, "password": "nope-nope"},
            headers={"X-Forwarded-For": "192.0.2.11"},
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003

    async def test_signup_closed_once_staff_exist(
        self, client: AsyncClient, admin: Session
    ) -> None:
        resp = await client.post(
            "/api/v1/auth/signup",
            json={"name": "Late", "email": "late@example.com", "password": PASSWORD},
        )
        assert resp.status_code == 403


class TestSession:
    async def test_me(self, client: AsyncClient, admin: Session) -> None:
        staff, headers = admin
        resp = await client.get("/api/v1/auth/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == str(staff.id)

    async def test_refresh(self, client: AsyncClient, manager: Session) -> None:
        staff, _ = manager
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": staff.email, "password": PASSWORD},
            headers={"X-Forwarded-For": "192.0.2.12"},
        )
        refresh = login.json()["data"]["refresh_token"]
        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]

    async def test_access_token_rejected_as_refresh(
        self, client: AsyncClient, admin: Session
    ) -> None:
        _, headers = admin
        access = headers["Authorization"].removeprefix("Bearer ")
        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": access})
        assert resp.status_code == 401

    async def test_update_profile(self, client: AsyncClient, manager: Session) -> None:
        _, headers = manager
        resp = await client.put(
            "/api/v1/auth/profile", json={"name": "Renamed Manager"}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "Renamed Manager"

    async def test_change_password_wrong_current(
        self, client: AsyncClient, manager: Session
    ) -> None:
        _, headers = manager
        resp = await client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "not-it", "new_password": "another1"},
            headers=headers,
        )
        assert resp.status_code == 400


class TestForgotPassword:
    async def test_unknown_email_is_404(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/forgot-password/send-otp",
            json={"email": "nobody-here@example.com"},
            headers={"X-Forwarded-For": "192.0.2.20"},
        )
        assert resp.status_code == 404

    async def test_wrong_code_counts_attempts(
        self, client: AsyncClient, manager: Session
    ) -> None:
        staff, _ = manager
        ip = {"X-Forwarded-For": "192.0.2.21"}
        sent = await client.post(
            "/api/v1/auth/forgot-password/send-otp", json={"email": staff.email}, headers=ip
        )
        assert sent.status_code == 200
        resp = await client.post(
            "/api/v1/auth/forgot-password/verify-otp",
            json={"email": staff.email, "otp": "000000", "new_password": "another1"},
            headers=ip,
        )
        if resp.status_code == 200:
            pytest.skip("random OTP happened to be 000000")
        assert resp.status_code == 400


async def test_login_headers_helper_roundtrip(client: AsyncClient, admin: Session) -> None:
    staff, _ = admin
    headers = await login_headers(client, staff.email)
    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 200
