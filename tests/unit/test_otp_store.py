"""Tests for the Redis-backed password reset OTP store."""

import json
from datetime import timedelta
from typing import Any

import pytest

from src.bo_common.datetime_utils import utc_now
from src.bo_common.errors import (
    InvalidOtpError,
    OtpAttemptsExceededError,
    OtpExpiredError,
    OtpNotFoundError,
)
from src.bo_gateway.auth.otp_store import OtpStore, generate_otp


class FakeRedis:
    """Just enough of redis.asyncio.Redis for OtpStore."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None, keepttl: bool = False) -> None:
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        elif not keepttl:
            self.ttls.pop(key, None)

    async def delete(self, key: str) -> int:
        self.ttls.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def store(redis: FakeRedis) -> OtpStore:
    return OtpStore(redis, ttl_seconds=300, max_attempts=3)  # type: ignore[arg-type]


def _record(redis: FakeRedis, email: str = "bob@example.com") -> dict[str, Any]:
    return json.loads(redis.data[f"bo:otp:{email}"])


def test_generate_otp_is_six_digits() -> None:
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6 and otp.isdigit()


async def test_issue_stores_record_with_ttl(store: OtpStore, redis: FakeRedis) -> None:
    otp = await store.issue("Bob@Example.com")
    record = _record(redis)
    assert record["otp"] == otp
    assert record["attempts"] == 0
    assert redis.ttls["bo:otp:bob@example.com"] == 300


async def test_verify_success(store: OtpStore) -> None:
    otp = await store.issue("bob@example.com")
    await store.verify("bob@example.com", otp)


async def test_missing_otp(store: OtpStore) -> None:
    with pytest.raises(OtpNotFoundError):
        await store.verify("bob@example.com", "123456")


async def test_wrong_otp_counts_attempts(store: OtpStore, redis: FakeRedis) -> None:
    otp = await store.issue("bob@example.com")
    wrong = "000000" if otp != "000000" else "111111"

    with pytest.raises(InvalidOtpError) as exc_info:
        await store.verify("bob@example.com", wrong)
    assert exc_info.value.remaining_attempts == 2
    assert _record(redis)["attempts"] == 1
    # TTL survives the rewrite
    assert redis.ttls["bo:otp:bob@example.com"] == 300

    with pytest.raises(InvalidOtpError) as exc_info:
        await store.verify("bob@example.com", wrong)
    assert exc_info.value.remaining_attempts == 1


async def test_attempts_exhausted_deletes_record(store: OtpStore, redis: FakeRedis) -> None:
    otp = await store.issue("bob@example.com")
    record = _record(redis)
    record["attempts"] = 3
    redis.data["bo:otp:bob@example.com"] = json.dumps(record)

    with pytest.raises(OtpAttemptsExceededError):
        await store.verify("bob@example.com", otp)
    assert "bo:otp:bob@example.com" not in redis.data


async def test_expired_record_is_rejected(store: OtpStore, redis: FakeRedis) -> None:
    otp = await store.issue("bob@example.com")
    record = _record(redis)
    record["expires_at"] = (utc_now() - timedelta(seconds=1)).isoformat()
    redis.data["bo:otp:bob@example.com"] = json.dumps(record)

    with pytest.raises(OtpExpiredError):
        await store.verify("bob@example.com", otp)
    assert "bo:otp:bob@example.com" not in redis.data


async def test_consume_removes_record(store: OtpStore, redis: FakeRedis) -> None:
    await store.issue("bob@example.com")
    await store.consume("bob@example.com")
    assert redis.data == {}
