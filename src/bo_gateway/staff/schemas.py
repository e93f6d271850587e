"""Pydantic request/response schemas for the auth endpoints.

All responses are wrapped in ApiResponse at the router layer.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from src.bo_common.permissions import normalize_permissions
from src.bo_gateway.auth.password import MIN_PASSWORD_LENGTH
from src.bo_gateway.staff.db_models import StaffModel


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


StaffName = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_non_blank)]


class SignupRequest(BaseModel):
    name: StaffName
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UpdateProfileRequest(BaseModel):
    name: StaffName


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)


class SendOtpRequest(BaseModel):
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$")
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)


class StaffInfo(BaseModel):
    """Staff record as returned by /auth/me and the staff endpoints."""

    id: str
    name: str
    email: str
    role: str
    status: str
    permissions: dict[str, dict[str, bool]]
    is_archived: bool
    archived_at: str | None
    last_login: str | None
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_model(cls, staff: StaffModel) -> "StaffInfo":
        return cls(
            id=str(staff.id),
            name=staff.name,
            email=staff.email,
            role=staff.role,
            status=staff.status,
            permissions=normalize_permissions(staff.permissions),
            is_archived=bool(staff.is_archived),
            archived_at=_iso(staff.archived_at),
            last_login=_iso(staff.last_login),
            created_at=_iso(staff.created_at),
            updated_at=_iso(staff.updated_at),
        )


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    staff: StaffInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int


class SendOtpResponse(BaseModel):
    email_sent: bool
    expires_in_seconds: int
    debug_otp: str | None = None
