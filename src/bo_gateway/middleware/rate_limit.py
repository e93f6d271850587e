"""Fixed-window rate limiting for the brute-forceable auth endpoints.

Rules:
  - POST /api/v1/auth/login                    -> group "login"
  - POST /api/v1/auth/forgot-password/*        -> group "forgot_password"
  Both: AUTH_RATE_LIMIT_PER_MINUTE requests per minute per client IP.

Redis logic (key "{prefix}:ratelimit:{ip}:{group}"):
    count = INCR key
    if count == 1: EXPIRE key 60
    if count > limit: 429 + Retry-After (remaining TTL)

The response is built here rather than raised: exceptions thrown from a
BaseHTTPMiddleware never reach the app's AppError handler.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.bo_common.errors import RateLimitError
from src.bo_common.redis_client import get_redis, redis_key
from src.bo_common.response import error_response
from src.bo_gateway.client_ip import get_client_ip

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60

_AUTH_PREFIX = "/api/v1/auth"


def endpoint_group(method: str, path: str) -> str | None:
    """Map a request to its rate-limit group, or None when unlimited."""
    if method != "POST":
        return None
    path = path.rstrip("/")
    if path == f"{_AUTH_PREFIX}/login":
        return "login"
    if path.startswith(f"{_AUTH_PREFIX}/forgot-password/"):
        return "forgot_password"
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit: int | None = None,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._limit = limit if limit is not None else settings.AUTH_RATE_LIMIT_PER_MINUTE
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        group = endpoint_group(request.method, request.url.path)
        if group is None:
            return await call_next(request)

        ip = get_client_ip(request)
        key = redis_key("ratelimit", ip, group)
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, WINDOW_SECONDS)
            ttl = await redis.ttl(key) if count > self._limit else 0
        except RedisError:
            # Fail open when Redis is down
            logger.warning("Rate limit check skipped for %s (%s): Redis unavailable", ip, group)
            return await call_next(request)

        if count > self._limit:
            retry_after = ttl if ttl and ttl > 0 else WINDOW_SECONDS
            logger.info("Rate limit hit: ip=%s group=%s count=%d", ip, group, count)
            exc = RateLimitError(retry_after)
            resp = error_response(exc.code, exc.message, {"retry_after": retry_after})
            resp.request_id = getattr(request.state, "request_id", resp.request_id)
            return JSONResponse(
                status_code=exc.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
