"""StaffService and RoleService.

Module-level permission flags are enforced by the router dependencies
(require_permission); the record-level rules (no self edit/delete, email
changes by admins only, Super Admin / sole-member gates) live here.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_activity.application.service import ActivityService
from src.bo_common.datetime_utils import utc_now
from src.bo_common.enums import SUPER_ADMIN_ROLE, ActivityAction, StaffStatus
from src.bo_common.errors import (
    EmailExistsError,
    PermissionDeniedError,
    RoleExistsError,
    RoleInUseError,
    RoleNotFoundError,
    StaffNotFoundError,
)
from src.bo_common.pagination import Page, PaginationInfo
from src.bo_common.permissions import (
    Actor,
    empty_permissions,
    ensure_not_self,
    full_permissions,
    is_admin,
    is_super_admin,
    normalize_permissions,
)
from src.bo_gateway.auth.password import hash_password
from src.bo_gateway.staff.db_models import StaffModel
from src.bo_gateway.staff.schemas import StaffInfo
from src.bo_notify.email import EmailSender
from src.bo_notify.templates import welcome_email_html, welcome_subject
from src.bo_staff.application.schemas import (
    CreateStaffRequest,
    CreateStaffResponse,
    RefreshPermissionsResponse,
    RoleItem,
    StaffCredentials,
    StaffListResponse,
    UpdateStaffRequest,
)
from src.bo_staff.domain.models import StaffFilter
from src.bo_staff.domain.repository import RoleRepositoryProtocol, StaffRepositoryProtocol
from src.bo_staff.infrastructure.persistence import RoleRepository, StaffRepository

logger = logging.getLogger(__name__)


class StaffService:
    def __init__(
        self,
        repo: StaffRepositoryProtocol | None = None,
        roles: RoleRepositoryProtocol | None = None,
        activity: ActivityService | None = None,
        email_sender: EmailSender | None = None,
    ) -> None:
        self._repo: StaffRepositoryProtocol = repo or StaffRepository()
        self._roles: RoleRepositoryProtocol = roles or RoleRepository()
        self._activity = activity or ActivityService()
        self._email = email_sender or EmailSender()

    async def list_staff(
        self, db: AsyncSession, flt: StaffFilter, page: Page
    ) -> StaffListResponse:
        rows, total = await self._repo.list_staff(db, flt, page.limit, page.offset)
        return StaffListResponse(
            items=[StaffInfo.from_model(s) for s in rows],
            pagination=PaginationInfo.build(page, total),
        )

    async def get_staff(self, db: AsyncSession, staff_id: str) -> StaffModel:
        staff = await self._repo.get(db, staff_id)
        if staff is None:
            raise StaffNotFoundError(staff_id)
        return staff

    async def _require_role(self, db: AsyncSession, role_name: str) -> str:
        role = await self._roles.find_by_name(db, role_name)
        if role is None:
            raise RoleNotFoundError(role_name)
        return role.name

    async def create_staff(
        self, db: AsyncSession, actor: Actor, body: CreateStaffRequest, ip: str
    ) -> CreateStaffResponse:
        email = str(body.email).strip().lower()
        try:
            if await self._repo.get_by_email(db, email) is not None:
                raise EmailExistsError()
            role = await self._require_role(db, body.role)

            staff = StaffModel(
                name=body.name,
                email=email,
                password_hash=hash_password(body.password),
                role=role,
                status=StaffStatus.ACTIVE.value,
                permissions=(
                    normalize_permissions(body.permissions)
                    if body.permissions is not None
                    else empty_permissions()
                ),
                is_archived=False,
            )
            await self._repo.add(db, staff)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.ADD_STAFF,
                f"Added staff member {staff.name}",
                f"Email: {email}, Role: {role}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(staff)

        sent = await self._email.send(
            email,
            welcome_subject(),
            welcome_email_html(staff.name, email, body.password),
        )
        if not sent:
            logger.warning(
                "Welcome email to %s not delivered; credentials must be handed over manually",
                email,
            )
        return CreateStaffResponse(
            staff=StaffInfo.from_model(staff),
            credentials=StaffCredentials(email=email, temporary_password=body.password),
            email_sent=sent,
        )

    async def update_staff(
        self,
        db: AsyncSession,
        actor: Actor,
        staff_id: str,
        body: UpdateStaffRequest,
        ip: str,
    ) -> StaffModel:
        ensure_not_self(actor, staff_id, "edit")
        staff = await self.get_staff(db, staff_id)
        changes: list[str] = []
        try:
            if body.email is not None:
                new_email = str(body.email).strip().lower()
                if new_email != staff.email.lower():
                    if not is_admin(actor.role):
                        raise PermissionDeniedError("change another member's email")
                    existing = await self._repo.get_by_email(db, new_email)
                    if existing is not None and existing.id != staff.id:
                        raise EmailExistsError()
                    changes.append(f"email: {staff.email} → {new_email}")
                    staff.email = new_email
            if body.name is not None and body.name != staff.name:
                changes.append(f"name: {staff.name} → {body.name}")
                staff.name = body.name
            if body.role is not None and body.role != staff.role:
                role = await self._require_role(db, body.role)
                changes.append(f"role: {staff.role} → {role}")
                staff.role = role
            if body.status is not None and body.status.value != staff.status:
                changes.append(f"status: {staff.status} → {body.status.value}")
                staff.status = body.status.value
            if body.permissions is not None:
                staff.permissions = normalize_permissions(body.permissions)
                changes.append("permissions updated")
            if body.is_archived is not None and body.is_archived != staff.is_archived:
                staff.is_archived = body.is_archived
                staff.archived_at = utc_now() if body.is_archived else None
                changes.append("archived" if body.is_archived else "restored")

            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.EDIT_STAFF,
                f"Updated staff member {staff.name}",
                "; ".join(changes) or "No changes",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(staff)
        return staff

    async def delete_staff(
        self, db: AsyncSession, actor: Actor, staff_id: str, ip: str
    ) -> None:
        ensure_not_self(actor, staff_id, "delete")
        staff = await self.get_staff(db, staff_id)
        try:
            name, email = staff.name, staff.email
            await self._repo.delete(db, staff)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_STAFF,
                f"Deleted staff member {name}",
                f"Email: {email}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def refresh_permissions(
        self, db: AsyncSession, actor: Actor, ip: str
    ) -> RefreshPermissionsResponse:
        """Reset every non-Super Admin member to an empty matrix."""
        if not is_super_admin(actor.role):
            raise PermissionDeniedError("refresh permissions (Super Admin only)")
        try:
            count = await self._repo.reset_permissions(db, empty_permissions(), SUPER_ADMIN_ROLE)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.REFRESH_PERMISSIONS,
                "Reset permissions for all staff members",
                f"Updated {count} staff members",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.warning("Permissions reset for %d staff members by %s", count, actor.name)
        return RefreshPermissionsResponse(updated_count=count)

    async def fix_admin_permissions(self, db: AsyncSession, actor: StaffModel) -> StaffModel:
        """Grant full permissions to the caller when they are the only staff member."""
        if await self._repo.count(db) != 1:
            raise PermissionDeniedError("fix permissions (only the sole staff member may)")
        try:
            actor.permissions = full_permissions()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(actor)
        logger.warning("Granted full permissions to sole staff member %s", actor.email)
        return actor


class RoleService:
    def __init__(
        self,
        repo: RoleRepositoryProtocol | None = None,
        staff_repo: StaffRepositoryProtocol | None = None,
        activity: ActivityService | None = None,
    ) -> None:
        self._repo: RoleRepositoryProtocol = repo or RoleRepository()
        self._staff: StaffRepositoryProtocol = staff_repo or StaffRepository()
        self._activity = activity or ActivityService()

    async def list_roles(self, db: AsyncSession) -> list[RoleItem]:
        return [RoleItem.from_domain(r) for r in await self._repo.list_roles(db)]

    async def create_role(
        self, db: AsyncSession, actor: Actor, name: str, ip: str
    ) -> RoleItem:
        try:
            if await self._repo.find_by_name(db, name) is not None:
                raise RoleExistsError(name)
            role = await self._repo.insert(db, name)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.ADD_ROLE,
                f"Added role {name}",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return RoleItem.from_domain(role)

    async def rename_role(
        self, db: AsyncSession, actor: Actor, role_id: str, name: str, ip: str
    ) -> RoleItem:
        """Rename a role and move every member holding it, in one transaction."""
        role = await self._repo.get(db, role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        try:
            if await self._repo.find_by_name(db, name, exclude_id=role_id) is not None:
                raise RoleExistsError(name)
            renamed = await self._repo.rename(db, role_id, name)
            if renamed is None:
                raise RoleNotFoundError(role_id)
            moved = 0
            if role.name != name:
                moved = await self._staff.rename_role(db, role.name, name)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.EDIT_ROLE,
                f"Renamed role {role.name} to {name}",
                f"Staff members updated: {moved}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        renamed.member_count = role.member_count
        return RoleItem.from_domain(renamed)

    async def delete_role(
        self, db: AsyncSession, actor: Actor, role_id: str, ip: str
    ) -> None:
        role = await self._repo.get(db, role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        try:
            if await self._staff.count_with_role(db, role.name) > 0:
                raise RoleInUseError(role.name)
            await self._repo.delete(db, role_id)
            await self._activity.record(
                db,
                str(actor.id),
                actor.name,
                ActivityAction.DELETE_ROLE,
                f"Deleted role {role.name}",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
