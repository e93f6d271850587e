"""Auth service: bootstrap signup, login, token refresh, profile and password.

Every mutating method commits its own transaction, activity log row included,
and rolls back on failure.
"""

import logging
import uuid

import redis.asyncio as aioredis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bo_activity.application.service import ActivityService
from src.bo_common.datetime_utils import utc_now
from src.bo_common.enums import SUPER_ADMIN_ROLE, ActivityAction, StaffStatus
from src.bo_common.errors import (
    AccountDeactivatedError,
    AccountDeletedError,
    CurrentPasswordIncorrectError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    SignupClosedError,
    StaffNotFoundError,
)
from src.bo_common.permissions import full_permissions
from src.bo_gateway.auth.dependencies import repair_missing_permissions
from src.bo_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.bo_gateway.auth.otp_store import OtpStore
from src.bo_gateway.auth.password import hash_password, verify_password
from src.bo_gateway.staff.db_models import StaffModel
from src.bo_notify.email import EmailSender
from src.bo_notify.templates import otp_email_html, otp_subject

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        activity: ActivityService | None = None,
        email_sender: EmailSender | None = None,
    ) -> None:
        self._activity = activity or ActivityService()
        self._email = email_sender or EmailSender()

    async def get_by_email(self, db: AsyncSession, email: str) -> StaffModel | None:
        result = await db.execute(
            select(StaffModel).where(func.lower(StaffModel.email) == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def signup(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password: str,
        ip: str,
    ) -> StaffModel:
        """Create the very first staff member (Super Admin, full permissions).

        Once anyone exists, staff are added through POST /staff instead.
        """
        try:
            total = (await db.execute(select(func.count()).select_from(StaffModel))).scalar_one()
            if total > 0:
                raise SignupClosedError()

            staff = StaffModel(
                name=name,
                email=normalize_email(email),
                password_hash=hash_password(password),
                role=SUPER_ADMIN_ROLE,
                status=StaffStatus.ACTIVE.value,
                permissions=full_permissions(),
                is_archived=False,
            )
            db.add(staff)
            await db.flush()
            await self._activity.record(
                db,
                str(staff.id),
                staff.name,
                ActivityAction.SIGNUP,
                f"{staff.name} created the first administrator account",
                f"Email: {staff.email}",
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(staff)
        logger.info("Bootstrap signup completed for %s", staff.email)
        return staff

    async def login(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        ip: str,
    ) -> tuple[StaffModel, str, str]:
        """Authenticate and return (staff, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError so
        the response does not reveal which emails exist.
        """
        staff = await self.get_by_email(db, email)
        if staff is None or not verify_password(password, staff.password_hash):
            raise InvalidCredentialsError()
        if not staff.is_active:
            raise AccountDeactivatedError()

        await repair_missing_permissions(db, staff)
        try:
            staff.last_login = utc_now()
            await self._activity.record(
                db,
                str(staff.id),
                staff.name,
                ActivityAction.LOGIN,
                f"{staff.name} logged in",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(staff)
        return staff, create_access_token(str(staff.id)), create_refresh_token(str(staff.id))

    async def refresh(self, db: AsyncSession, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token.

        The staff row is re-checked so a deleted or deactivated member cannot
        keep minting access tokens.
        """
        claims = decode_token(refresh_token, expected_type="refresh")
        staff = await db.get(StaffModel, _to_uuid(claims["sub"]))
        if staff is None:
            raise AccountDeletedError()
        if not staff.is_active:
            raise AccountDeactivatedError()
        return create_access_token(str(staff.id))

    async def update_profile(
        self, db: AsyncSession, staff: StaffModel, name: str, ip: str
    ) -> StaffModel:
        old_name = staff.name
        try:
            staff.name = name
            await self._activity.record(
                db,
                str(staff.id),
                name,
                ActivityAction.UPDATE_PROFILE,
                f"{name} updated their profile",
                f"Name: {old_name} → {name}" if old_name != name else None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(staff)
        return staff

    async def change_password(
        self,
        db: AsyncSession,
        staff: StaffModel,
        current_password: str,
        new_password: str,
        ip: str,
    ) -> None:
        if not verify_password(current_password, staff.password_hash):
            raise CurrentPasswordIncorrectError()
        try:
            staff.password_hash = hash_password(new_password)
            await self._activity.record(
                db,
                str(staff.id),
                staff.name,
                ActivityAction.CHANGE_PASSWORD,
                f"{staff.name} changed their password",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def send_reset_otp(
        self, db: AsyncSession, redis: aioredis.Redis, email: str
    ) -> tuple[bool, str | None, int]:
        """Issue and email a reset OTP.

        Returns (email_sent, debug_otp, ttl_seconds). debug_otp is only set
        when the mail could not be delivered and DEBUG is on.
        """
        staff = await self.get_by_email(db, email)
        if staff is None:
            raise StaffNotFoundError(normalize_email(email))

        store = OtpStore(redis)
        otp = await store.issue(staff.email)
        sent = await self._email.send(
            staff.email,
            otp_subject(),
            otp_email_html(staff.name, otp, max(store.ttl_seconds // 60, 1)),
        )
        if not sent:
            logger.warning("Password reset OTP for %s could not be emailed", staff.email)
        debug_otp = otp if (not sent and settings.DEBUG) else None
        return sent, debug_otp, store.ttl_seconds

    async def reset_password_with_otp(
        self,
        db: AsyncSession,
        redis: aioredis.Redis,
        email: str,
        otp: str,
        new_password: str,
        ip: str,
    ) -> None:
        store = OtpStore(redis)
        await store.verify(email, otp)

        staff = await self.get_by_email(db, email)
        if staff is None:
            await store.consume(email)
            raise StaffNotFoundError(normalize_email(email))

        try:
            staff.password_hash = hash_password(new_password)
            await self._activity.record(
                db,
                str(staff.id),
                staff.name,
                ActivityAction.PASSWORD_RESET,
                f"{staff.name} reset their password via OTP",
                None,
                ip,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await store.consume(email)


def _to_uuid(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise InvalidRefreshTokenError() from None
