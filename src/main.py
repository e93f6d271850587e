"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from src.bo_activity.api.router import router as activity_router
from src.bo_bank.api.router import banks_router, transactions_router
from src.bo_common.database import check_database, engine
from src.bo_common.errors import AppError
from src.bo_common.redis_client import check_redis, close_redis
from src.bo_common.response import error_response
from src.bo_dashboard.api.router import router as dashboard_router
from src.bo_deposit.api.router import router as deposit_router
from src.bo_gateway.api.router import router as auth_router
from src.bo_gateway.middleware.rate_limit import RateLimitMiddleware
from src.bo_gateway.middleware.request_log import RequestLogMiddleware
from src.bo_staff.api.router import roles_router
from src.bo_staff.api.router import router as staff_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("bo.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    await check_database()
    await check_redis()
    logger.info("%s started", settings.APP_NAME)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Last added runs first: the request id exists before rate limiting answers.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    headers = None
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    if exc.http_status >= 500:
        logger.error(
            "AppError %d on %s %s: %s", exc.code, request.method, request.url.path, exc.message
        )
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
        headers=headers,
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(staff_router, prefix="/api/v1")
app.include_router(roles_router, prefix="/api/v1")
app.include_router(deposit_router, prefix="/api/v1")
app.include_router(banks_router, prefix="/api/v1")
app.include_router(transactions_router, prefix="/api/v1")
app.include_router(activity_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
