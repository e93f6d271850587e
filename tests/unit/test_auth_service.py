"""Unit tests for AuthService (mocked DB, activity log and email)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.bo_common.enums import ActivityAction
from src.bo_common.errors import (
    AccountDeactivatedError,
    AccountDeletedError,
    CurrentPasswordIncorrectError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    SignupClosedError,
    StaffNotFoundError,
)
from src.bo_common.permissions import basic_staff_permissions, full_permissions
from src.bo_gateway.auth.jwt_handler import create_refresh_token, decode_token
from src.bo_gateway.auth.password import hash_password, verify_password
from src.bo_gateway.staff.service import AuthService
from tests.factories import make_staff


def _scalar_result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


@pytest.fixture
def activity() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def email_sender() -> AsyncMock:
    sender = AsyncMock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def service(activity: AsyncMock, email_sender: AsyncMock) -> AuthService:
    return AuthService(activity=activity, email_sender=email_sender)


class TestSignup:
    async def test_first_staff_becomes_super_admin(
        self, service: AuthService, mock_db: AsyncMock, activity: AsyncMock
    ) -> None:
        mock_db.add = MagicMock()
        mock_db.execute = AsyncMock(return_value=_scalar_result(0))

        staff = await service.signup(mock_db, "Alice", " Alice@Example.com ", "secret1", "1.2.3.4")

        assert staff.role == "Super Admin"
        assert staff.email == "alice@example.com"
        assert staff.permissions == full_permissions()
        assert verify_password("secret1", staff.password_hash)
        assert activity.record.await_args.args[3] == ActivityAction.SIGNUP
        mock_db.commit.assert_awaited_once()

    async def test_closed_once_anyone_exists(
        self, service: AuthService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(1))
        with pytest.raises(SignupClosedError):
            await service.signup(mock_db, "Eve", "eve@example.com", "secret1", "1.2.3.4")
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()


class TestLogin:
    async def test_unknown_email(self, service: AuthService, mock_db: AsyncMock) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(None))
        with pytest.raises(InvalidCredentialsError):
            await service.login(mock_db, "nobody@example.com", "secret1", "ip")

    async def test_wrong_password(self, service: AuthService, mock_db: AsyncMock) -> None:
        staff = make_staff()
        staff.password_hash = hash_password("secret1")
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))
        with pytest.raises(InvalidCredentialsError):
            await service.login(mock_db, staff.email, "wrong-pass", "ip")

    async def test_deactivated_account(self, service: AuthService, mock_db: AsyncMock) -> None:
        staff = make_staff(status="inactive")
        staff.password_hash = hash_password("secret1")
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))
        with pytest.raises(AccountDeactivatedError):
            await service.login(mock_db, staff.email, "secret1", "ip")

    async def test_success_issues_tokens_and_logs(
        self, service: AuthService, mock_db: AsyncMock, activity: AsyncMock
    ) -> None:
        staff = make_staff()
        staff.password_hash = hash_password("secret1")
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))

        result, access, refresh = await service.login(mock_db, staff.email, "secret1", "ip")

        assert result is staff
        assert staff.last_login is not None
        assert decode_token(access, "access")["sub"] == str(staff.id)
        assert decode_token(refresh, "refresh")["sub"] == str(staff.id)
        assert activity.record.await_args.args[3] == ActivityAction.LOGIN

    async def test_missing_matrix_is_repaired_on_login(
        self, service: AuthService, mock_db: AsyncMock
    ) -> None:
        staff = make_staff(role="Manager", permissions={})
        staff.password_hash = hash_password("secret1")
        mock_db.execute = AsyncMock(side_effect=[_scalar_result(staff), _scalar_result(3)])

        await service.login(mock_db, staff.email, "secret1", "ip")

        assert staff.permissions == basic_staff_permissions()


class TestRefresh:
    async def test_deleted_staff(self, service: AuthService, mock_db: AsyncMock) -> None:
        mock_db.get = AsyncMock(return_value=None)
        token = create_refresh_token("6a1f2c9e-0000-4000-8000-000000000001")
        with pytest.raises(AccountDeletedError):
            await service.refresh(mock_db, token)

    async def test_non_uuid_subject(self, service: AuthService, mock_db: AsyncMock) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(mock_db, create_refresh_token("not-a-uuid"))

    async def test_success(self, service: AuthService, mock_db: AsyncMock) -> None:
        staff = make_staff()
        mock_db.get = AsyncMock(return_value=staff)
        access = await service.refresh(mock_db, create_refresh_token(str(staff.id)))
        assert decode_token(access, "access")["sub"] == str(staff.id)


class TestPasswords:
    async def test_change_password_checks_current(
        self, service: AuthService, mock_db: AsyncMock
    ) -> None:
        staff = make_staff()
        staff.password_hash = hash_password("secret1")
        with pytest.raises(CurrentPasswordIncorrectError):
            await service.change_password(mock_db, staff, "nope", "newsecret", "ip")

    async def test_change_password(self, service: AuthService, mock_db: AsyncMock) -> None:
        staff = make_staff()
        staff.password_hash = hash_password("secret1")
        await service.change_password(mock_db, staff, "secret1", "newsecret", "ip")
        assert verify_password("newsecret", staff.password_hash)
        mock_db.commit.assert_awaited_once()


class TestForgotPassword:
    async def test_unknown_email(self, service: AuthService, mock_db: AsyncMock) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(None))
        with pytest.raises(StaffNotFoundError):
            await service.send_reset_otp(mock_db, AsyncMock(), "ghost@example.com")

    async def test_sent_otp_is_not_echoed(
        self, service: AuthService, mock_db: AsyncMock, email_sender: AsyncMock
    ) -> None:
        staff = make_staff()
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))
        sent, debug_otp, ttl = await service.send_reset_otp(mock_db, AsyncMock(), staff.email)
        assert sent is True
        assert debug_otp is None
        assert ttl > 0
        email_sender.send.assert_awaited_once()

    async def test_undelivered_otp_echoed_only_in_debug(
        self, service: AuthService, mock_db: AsyncMock, email_sender: AsyncMock
    ) -> None:
        staff = make_staff()
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))
        email_sender.send.return_value = False

        with patch("src.bo_gateway.staff.service.settings.DEBUG", True):
            sent, debug_otp, _ = await service.send_reset_otp(mock_db, AsyncMock(), staff.email)
        assert sent is False
        assert debug_otp is not None and len(debug_otp) == 6

        with patch("src.bo_gateway.staff.service.settings.DEBUG", False):
            _, debug_otp, _ = await service.send_reset_otp(mock_db, AsyncMock(), staff.email)
        assert debug_otp is None

    async def test_reset_with_valid_otp(
        self, service: AuthService, mock_db: AsyncMock
    ) -> None:
        staff = make_staff()
        mock_db.execute = AsyncMock(return_value=_scalar_result(staff))
        store = AsyncMock()
        with patch("src.bo_gateway.staff.service.OtpStore", return_value=store):
            await service.reset_password_with_otp(
                mock_db, AsyncMock(), staff.email, "123456", "brandnew", "ip"
            )
        store.verify.assert_awaited_once_with(staff.email, "123456")
        store.consume.assert_awaited_once()
        assert verify_password("brandnew", staff.password_hash)
