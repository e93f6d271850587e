"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Staff (13xx: Roles)
  2xxx: Deposit entries
  3xxx: Banks / bank transactions
  4xxx: Activity log
  9xxx: System
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


# --- 1xxx: Auth/Staff ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class AccountDeactivatedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1004,
            "Your account is deactivated. Please contact an administrator.",
            403,
        )


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class AccountDeletedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1006,
            "Your account has been deleted. Please contact an administrator.",
            403,
        )


class PermissionDeniedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1007, f"No permission to {detail}", 403)


class StaffNotFoundError(AppError):
    def __init__(self, staff_id: str) -> None:
        super().__init__(1008, f"Staff member not found: {staff_id}", 404)


class SelfModificationError(AppError):
    def __init__(self, action: str) -> None:
        super().__init__(
            1009,
            f"Cannot {action} your own account. Ask another admin for assistance.",
            400,
        )


class SignupClosedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1010,
            "Signup is closed. New staff members are added by an administrator.",
            403,
        )


class CurrentPasswordIncorrectError(AppError):
    def __init__(self) -> None:
        super().__init__(1011, "Current password is incorrect", 400)


class OtpNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(1021, "OTP not found or expired. Please request a new OTP.", 400)


class OtpExpiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1022, "OTP has expired. Please request a new OTP.", 400)


class OtpAttemptsExceededError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1023, "Too many incorrect attempts. Please request a new OTP.", 400
        )


class InvalidOtpError(AppError):
    def __init__(self, remaining_attempts: int) -> None:
        super().__init__(
            1024,
            "Invalid OTP. Please try again.",
            400,
            data={"remaining_attempts": remaining_attempts},
        )
        self.remaining_attempts = remaining_attempts


# --- 13xx: Roles ---

class RoleExistsError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(1301, f"Role with this name already exists: {name}", 409)


class RoleNotFoundError(AppError):
    def __init__(self, role_id: str) -> None:
        super().__init__(1302, f"Role not found: {role_id}", 404)


class RoleInUseError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(
            1303, f"Cannot delete role assigned to staff members: {name}", 409
        )


# --- 2xxx: Deposit entries ---

class DepositNotFoundError(AppError):
    def __init__(self, deposit_id: str) -> None:
        super().__init__(2001, f"Deposit entry not found: {deposit_id}", 404)


# --- 3xxx: Banks ---

class BankExistsError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3001, f"Bank with this name already exists: {name}", 409)


class BankNotFoundError(AppError):
    def __init__(self, bank_id: str) -> None:
        super().__init__(3002, f"Bank not found: {bank_id}", 404)


class BankHasTransactionsError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3003, f"Cannot delete bank that has transactions: {name}", 409)


class BankTransactionNotFoundError(AppError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(3004, f"Bank transaction not found: {transaction_id}", 404)


# --- 4xxx: Activity log ---

class ActivityNotFoundError(AppError):
    def __init__(self, activity_id: str) -> None:
        super().__init__(4001, f"Activity log entry not found: {activity_id}", 404)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self, retry_after: int = 60) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)
        self.retry_after = retry_after


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
