"""Shared test fixtures."""

import os

# Settings() requires a secret; set one before anything imports config.settings.
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests")

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from src.bo_common.permissions import basic_staff_permissions  # noqa: E402
from src.bo_gateway.staff.db_models import StaffModel  # noqa: E402
from tests.factories import make_staff  # noqa: E402


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def super_admin() -> StaffModel:
    return make_staff()


@pytest.fixture
def staff_member() -> StaffModel:
    return make_staff(
        role="Manager",
        permissions=basic_staff_permissions(),
        name="Bob",
        email="bob@example.com",
    )
