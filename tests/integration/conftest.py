"""Integration-test fixtures.

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session. The whole suite is skipped
when PostgreSQL is not reachable.

Pre-condition: a migrated database (alembic upgrade head) and Redis.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import DBAPIError, OperationalError

from src.bo_common.database import async_session_factory, check_database
from src.bo_common.enums import SUPER_ADMIN_ROLE
from src.bo_common.permissions import basic_staff_permissions, full_permissions
from src.bo_gateway.auth.password import hash_password
from src.bo_gateway.staff.db_models import StaffModel
from src.main import app

PASSWORD = "TestPass1"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    try:
        await check_database()
    except (OSError, OperationalError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc}")

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def create_staff(role: str, permissions: dict) -> StaffModel:
    """Insert a staff row directly; signup is closed once anyone exists."""
    uid = uuid.uuid4().hex[:8]
    async with async_session_factory() as db:
        staff = StaffModel(
            name=f"{role} {uid}",
            email=f"{role.lower().replace(' ', '_')}_{uid}@example.com",
            password_hash=hash_password(PASSWORD),
            role=role,
            status="active",
            permissions=permissions,
            is_archived=False,
        )
        db.add(staff)
        await db.commit()
        await db.refresh(staff)
        return staff


async def login_headers(client: AsyncClient, email: str) -> dict[str, str]:
    # A fresh forwarded IP per login keeps the per-IP login limit out of the way
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": PASSWORD},
        headers={"X-Forwarded-For": f"198.51.100.{uuid.uuid4().int % 250 + 1}"},
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin(client: AsyncClient) -> tuple[StaffModel, dict[str, str]]:
    staff = await create_staff(SUPER_ADMIN_ROLE, full_permissions())
    return staff, await login_headers(client, staff.email)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def manager(client: AsyncClient) -> tuple[StaffModel, dict[str, str]]:
    staff = await create_staff("Manager", basic_staff_permissions())
    return staff, await login_headers(client, staff.email)
