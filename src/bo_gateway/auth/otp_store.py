"""Password-reset OTPs kept in Redis.

Key "{prefix}:otp:{email}" holds JSON {"otp", "attempts", "expires_at"} with a TTL of
OTP_TTL_SECONDS. expires_at is checked as well as the TTL so a key restored
from a snapshot cannot outlive its code.
"""

import json
import logging
import secrets
from datetime import datetime, timedelta

import redis.asyncio as aioredis

from config.settings import settings
from src.bo_common.datetime_utils import utc_now
from src.bo_common.errors import (
    InvalidOtpError,
    OtpAttemptsExceededError,
    OtpExpiredError,
    OtpNotFoundError,
)
from src.bo_common.redis_client import redis_key

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_otp() -> str:
    return f"{secrets.randbelow(10**OTP_LENGTH):0{OTP_LENGTH}d}"


def _key(email: str) -> str:
    return redis_key("otp", email.strip().lower())


class OtpStore:
    def __init__(
        self,
        redis: aioredis.Redis,
        ttl_seconds: int | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._redis = redis
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.OTP_TTL_SECONDS
        self._max_attempts = (
            max_attempts if max_attempts is not None else settings.OTP_MAX_ATTEMPTS
        )

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    async def issue(self, email: str) -> str:
        """Create (or replace) the OTP for `email` and return the code."""
        otp = generate_otp()
        record = {
            "otp": otp,
            "attempts": 0,
            "expires_at": (utc_now() + timedelta(seconds=self._ttl)).isoformat(),
        }
        await self._redis.set(_key(email), json.dumps(record), ex=self._ttl)
        logger.info("Issued password reset OTP for %s (ttl=%ds)", email, self._ttl)
        return otp

    async def verify(self, email: str, otp: str) -> None:
        """Check `otp` against the stored one; raises on every failure.

        Expired or exhausted records are deleted. A mismatch burns one attempt.
        """
        key = _key(email)
        raw = await self._redis.get(key)
        if raw is None:
            raise OtpNotFoundError()

        record = json.loads(raw)
        if datetime.fromisoformat(record["expires_at"]) <= utc_now():
            await self._redis.delete(key)
            raise OtpExpiredError()

        attempts = int(record.get("attempts", 0))
        if attempts >= self._max_attempts:
            await self._redis.delete(key)
            raise OtpAttemptsExceededError()

        if not secrets.compare_digest(str(record["otp"]), otp.strip()):
            record["attempts"] = attempts + 1
            await self._redis.set(key, json.dumps(record), keepttl=True)
            raise InvalidOtpError(max(self._max_attempts - record["attempts"], 0))

    async def consume(self, email: str) -> None:
        await self._redis.delete(_key(email))
