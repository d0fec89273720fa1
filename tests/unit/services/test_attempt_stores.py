"""
Unit tests for the in-memory and Redis attempt stores
"""
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.adapter.services.attempt_store import InMemoryAttemptStore, RedisAttemptStore

NOW = datetime(2025, 1, 15, 12, 0, 0)


@pytest.mark.asyncio
async def test_in_memory_returns_newest_first():
    store = InMemoryAttemptStore()
    await store.add_attempt("guest@hotel.com", NOW - timedelta(hours=2), timedelta(hours=24))
    await store.add_attempt("guest@hotel.com", NOW - timedelta(hours=1), timedelta(hours=24))

    attempts = await store.get_attempts("guest@hotel.com", NOW - timedelta(hours=24))

    assert attempts == [NOW - timedelta(hours=1), NOW - timedelta(hours=2)]


@pytest.mark.asyncio
async def test_in_memory_prunes_old_attempts_and_empty_keys():
    store = InMemoryAttemptStore()
    await store.add_attempt("guest@hotel.com", NOW - timedelta(hours=30), timedelta(hours=24))

    attempts = await store.get_attempts("guest@hotel.com", NOW - timedelta(hours=24))

    assert attempts == []
    assert "guest@hotel.com" not in store._attempts


@pytest.fixture
def redis():
    client = AsyncMock()
    client.zrevrange.return_value = []
    return client


@pytest.mark.asyncio
async def test_redis_add_attempt_sets_score_and_ttl(redis):
    store = RedisAttemptStore(redis)

    await store.add_attempt("guest@hotel.com", NOW, timedelta(hours=24))

    key = "password_reset:attempts:guest@hotel.com"
    score = NOW.replace(tzinfo=UTC).timestamp()
    redis.zadd.assert_awaited_once_with(key, {NOW.isoformat(): score})
    redis.expire.assert_awaited_once_with(key, 86400)


@pytest.mark.asyncio
async def test_redis_get_attempts_prunes_then_reads_newest_first(redis):
    newer = NOW - timedelta(minutes=1)
    older = NOW - timedelta(hours=3)
    redis.zrevrange.return_value = [
        (newer.isoformat(), newer.replace(tzinfo=UTC).timestamp()),
        (older.isoformat(), older.replace(tzinfo=UTC).timestamp()),
    ]
    store = RedisAttemptStore(redis)
    since = NOW - timedelta(hours=24)

    attempts = await store.get_attempts("guest@hotel.com", since)

    key = "password_reset:attempts:guest@hotel.com"
    redis.zremrangebyscore.assert_awaited_once_with(
        key, "-inf", since.replace(tzinfo=UTC).timestamp()
    )
    redis.zrevrange.assert_awaited_once_with(key, 0, -1, withscores=True)
    assert attempts == [newer, older]


@pytest.mark.asyncio
async def test_in_memory_sweeps_keys_that_are_never_checked_again():
    """
    Given attempts for many emails that are never requested again
    When a later check for another email runs after the window
    Then the stale emails are dropped from memory
    """
    store = InMemoryAttemptStore()
    for i in range(1000):
        await store.add_attempt(f"guest{i}@hotel.com", NOW, timedelta(hours=24))

    later = NOW + timedelta(days=2)
    await store.get_attempts("other@hotel.com", later - timedelta(hours=24))

    assert len(store._attempts) == 0


@pytest.mark.asyncio
async def test_in_memory_sweep_on_add_keeps_keys_inside_window():
    store = InMemoryAttemptStore()
    await store.add_attempt("old@hotel.com", NOW - timedelta(hours=30), timedelta(hours=24))
    await store.add_attempt("recent@hotel.com", NOW - timedelta(hours=1), timedelta(hours=24))

    await store.add_attempt("new@hotel.com", NOW + timedelta(minutes=5), timedelta(hours=24))

    assert set(store._attempts) == {"recent@hotel.com", "new@hotel.com"}


@pytest.mark.asyncio
async def test_redis_key_prefix_is_configurable(redis):
    store = RedisAttemptStore(redis, key_prefix="password_change:attempts:")

    await store.add_attempt("user-1", NOW, timedelta(minutes=15))

    redis.expire.assert_awaited_once_with("password_change:attempts:user-1", 900)
