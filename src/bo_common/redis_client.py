"""Shared Redis pool, used for password-reset OTPs and rate limiting only.

Nothing financial is ever cached here; deposits, bank transactions and
balances always go through PostgreSQL. Every key lives under
REDIS_KEY_PREFIX.
"""

import redis.asyncio as aioredis

from config.settings import settings

_pool: aioredis.Redis | None = None


def redis_key(*parts: str) -> str:
    """`redis_key("otp", email)` -> "bo:otp:<email>" with the default prefix."""
    return ":".join((settings.REDIS_KEY_PREFIX, *parts))


async def get_redis() -> aioredis.Redis:
    global _pool  # noqa: PLW0603
    if _pool is None:
        _pool = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return _pool


async def check_redis() -> None:
    """PING the pool. Raises redis.exceptions.ConnectionError when down."""
    await (await get_redis()).ping()


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.aclose()
        _pool = None
