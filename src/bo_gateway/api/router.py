"""Auth API router: bootstrap signup, login, refresh, profile, password reset.

All endpoints return ApiResponse. request_id comes from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.database import get_db_session
from src.bo_common.redis_client import get_redis
from src.bo_common.response import ApiResponse, respond
from src.bo_gateway.auth.dependencies import get_current_staff
from src.bo_gateway.auth.jwt_handler import access_token_ttl_seconds
from src.bo_gateway.client_ip import get_client_ip
from src.bo_gateway.staff.db_models import StaffModel
from src.bo_gateway.staff.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    SendOtpRequest,
    SendOtpResponse,
    SignupRequest,
    StaffInfo,
    UpdateProfileRequest,
    VerifyOtpRequest,
)
from src.bo_gateway.staff.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AuthService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentStaff = Annotated[StaffModel, Depends(get_current_staff)]


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create the first administrator (only while no staff exist)",
)
async def signup(request: Request, body: SignupRequest, db: DbSession) -> ApiResponse:
    staff = await _service.signup(
        db, body.name, str(body.email), body.password, get_client_ip(request)
    )
    return respond(request, StaffInfo.from_model(staff).model_dump(), "Account created")


@router.post("/login", response_model=ApiResponse, summary="Staff login")
async def login(request: Request, body: LoginRequest, db: DbSession) -> ApiResponse:
    staff, access_token, refresh_token = await _service.login(
        db, str(body.email), body.password, get_client_ip(request)
    )
    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=access_token_ttl_seconds(),
        staff=StaffInfo.from_model(staff),
    )
    return respond(request, data.model_dump(), "Login successful")


@router.post("/refresh", response_model=ApiResponse, summary="Refresh access token")
async def refresh_token(request: Request, body: RefreshRequest, db: DbSession) -> ApiResponse:
    access_token = await _service.refresh(db, body.refresh_token)
    data = RefreshResponse(access_token=access_token, expires_in=access_token_ttl_seconds())
    return respond(request, data.model_dump(), "Token refreshed")


@router.get("/me", response_model=ApiResponse, summary="Current staff member")
async def me(request: Request, staff: CurrentStaff) -> ApiResponse:
    return respond(request, StaffInfo.from_model(staff).model_dump())


@router.put("/profile", response_model=ApiResponse, summary="Update own profile")
async def update_profile(
    request: Request, body: UpdateProfileRequest, staff: CurrentStaff, db: DbSession
) -> ApiResponse:
    updated = await _service.update_profile(db, staff, body.name, get_client_ip(request))
    return respond(request, StaffInfo.from_model(updated).model_dump(), "Profile updated")


@router.post("/change-password", response_model=ApiResponse, summary="Change own password")
async def change_password(
    request: Request, body: ChangePasswordRequest, staff: CurrentStaff, db: DbSession
) -> ApiResponse:
    await _service.change_password(
        db, staff, body.current_password, body.new_password, get_client_ip(request)
    )
    return respond(request, None, "Password changed")


@router.post(
    "/forgot-password/send-otp",
    response_model=ApiResponse,
    summary="Email a password reset code",
)
async def send_otp(
    request: Request,
    body: SendOtpRequest,
    db: DbSession,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    sent, debug_otp, ttl = await _service.send_reset_otp(db, redis, str(body.email))
    data = SendOtpResponse(email_sent=sent, expires_in_seconds=ttl, debug_otp=debug_otp)
    message = "OTP sent to your email" if sent else "OTP generated but email could not be sent"
    return respond(request, data.model_dump(), message)


@router.post(
    "/forgot-password/verify-otp",
    response_model=ApiResponse,
    summary="Reset password with an emailed code",
)
async def verify_otp(
    request: Request,
    body: VerifyOtpRequest,
    db: DbSession,
    redis: Annotated[aioredis.Redis, Depends(get_redis)],
) -> ApiResponse:
    await _service.reset_password_with_otp(
        db, redis, str(body.email), body.otp, body.new_password, get_client_ip(request)
    )
    return respond(request, None, "Password reset successfully")
