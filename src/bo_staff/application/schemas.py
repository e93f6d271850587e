"""Pydantic schemas for staff management and roles."""

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from src.bo_common.enums import StaffStatus
from src.bo_common.pagination import PaginationInfo
from src.bo_gateway.auth.password import MIN_PASSWORD_LENGTH
from src.bo_gateway.staff.schemas import StaffInfo, StaffName
from src.bo_staff.domain.models import Role


def _strip_role(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("role name must not be blank")
    return v


RoleName = Annotated[str, Field(min_length=1, max_length=64), AfterValidator(_strip_role)]


# ---------------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------------


class CreateStaffRequest(BaseModel):
    name: StaffName
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    role: RoleName
    permissions: dict[str, dict[str, bool]] | None = None


class UpdateStaffRequest(BaseModel):
    """Partial update: omitted fields are left untouched."""

    name: StaffName | None = None
    email: EmailStr | None = None
    role: RoleName | None = None
    status: StaffStatus | None = None
    permissions: dict[str, dict[str, bool]] | None = None
    is_archived: bool | None = None


class StaffCredentials(BaseModel):
    email: str
    temporary_password: str


class CreateStaffResponse(BaseModel):
    staff: StaffInfo
    credentials: StaffCredentials
    email_sent: bool


class StaffListResponse(BaseModel):
    items: list[StaffInfo]
    pagination: PaginationInfo


class RefreshPermissionsResponse(BaseModel):
    updated_count: int


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


class RoleRequest(BaseModel):
    role_name: RoleName


class RoleItem(BaseModel):
    id: str
    name: str
    member_count: int
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, role: Role) -> "RoleItem":
        return cls(
            id=role.id,
            name=role.name,
            member_count=role.member_count,
            created_at=_iso(role.created_at),
            updated_at=_iso(role.updated_at),
        )


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None
