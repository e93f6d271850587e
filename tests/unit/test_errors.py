"""Tests for bo_common.errors and bo_common.response."""

from src.bo_common.errors import (
    AppError,
    BankHasTransactionsError,
    DepositNotFoundError,
    InvalidOtpError,
    PermissionDeniedError,
    RateLimitError,
    SelfModificationError,
    SignupClosedError,
)
from src.bo_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.data is None

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_permission_denied(self) -> None:
        err = PermissionDeniedError("edit Deposits")
        assert err.code == 1007
        assert err.http_status == 403
        assert err.message == "No permission to edit Deposits"

    def test_self_modification(self) -> None:
        err = SelfModificationError("delete")
        assert err.code == 1009
        assert err.http_status == 400
        assert "delete your own account" in err.message

    def test_signup_closed(self) -> None:
        err = SignupClosedError()
        assert (err.code, err.http_status) == (1010, 403)

    def test_invalid_otp_carries_remaining_attempts(self) -> None:
        err = InvalidOtpError(remaining_attempts=2)
        assert err.code == 1024
        assert err.data == {"remaining_attempts": 2}

    def test_deposit_not_found(self) -> None:
        err = DepositNotFoundError("abc")
        assert (err.code, err.http_status) == (2001, 404)
        assert "abc" in err.message

    def test_bank_has_transactions(self) -> None:
        err = BankHasTransactionsError("Chase Bank")
        assert (err.code, err.http_status) == (3003, 409)

    def test_rate_limit(self) -> None:
        err = RateLimitError(retry_after=42)
        assert (err.code, err.http_status) == (9001, 429)
        assert err.retry_after == 42


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(1003, "Invalid email or password")
        assert isinstance(resp, ApiResponse)
        assert resp.code == 1003
        assert resp.data is None
