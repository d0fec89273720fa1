"""
Attempt stores for the credential rate limiters.

InMemoryAttemptStore keeps attempts in the process and is only correct for a
single worker. RedisAttemptStore keeps one sorted set per key (score = epoch
seconds) so every instance sees the same attempts.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Dict, List, Optional

from redis.asyncio import Redis

from src.app.services.rate_limiter import IAttemptStore


SWEEP_INTERVAL = timedelta(minutes=1)


class InMemoryAttemptStore(IAttemptStore):
    """
    Attempts of every key, newest first.

    Keys whose newest attempt has left the window are swept out at most once
    per `sweep_interval`, so emails that are never seen again do not pile up.
    """

    def __init__(self, sweep_interval: timedelta = SWEEP_INTERVAL):
        self._attempts: Dict[str, List[datetime]] = {}
        self._lock = asyncio.Lock()
        self._sweep_interval = sweep_interval
        self._next_sweep: Optional[datetime] = None

    def _sweep(self, cutoff: datetime) -> None:
        if self._next_sweep is not None and cutoff < self._next_sweep:
            return
        stale = [key for key, attempts in self._attempts.items() if attempts[0] <= cutoff]
        for key in stale:
            del self._attempts[key]
        self._next_sweep = cutoff + self._sweep_interval

    async def get_attempts(self, key: str, since: datetime) -> List[datetime]:
        async with self._lock:
            self._sweep(since)
            recent = [at for at in self._attempts.get(key, []) if at > since]
            if recent:
                self._attempts[key] = recent
            else:
                self._attempts.pop(key, None)
            return list(recent)

    async def add_attempt(self, key: str, at: datetime, ttl: timedelta) -> None:
        async with self._lock:
            self._sweep(at - ttl)
            # Newest first
            self._attempts.setdefault(key, []).insert(0, at)


def _to_score(at: datetime) -> float:
    return at.replace(tzinfo=UTC).timestamp()


def _from_score(score: float) -> datetime:
    return datetime.fromtimestamp(score, UTC).replace(tzinfo=None)


class RedisAttemptStore(IAttemptStore):
    KEY_PREFIX = "password_reset:attempts:"

    def __init__(self, redis: Redis, key_prefix: str = KEY_PREFIX):
        self.redis = redis
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get_attempts(self, key: str, since: datetime) -> List[datetime]:
        redis_key = self._key(key)
        await self.redis.zremrangebyscore(redis_key, "-inf", _to_score(since))
        entries = await self.redis.zrevrange(redis_key, 0, -1, withscores=True)
        return [_from_score(score) for _, score in entries]

    async def add_attempt(self, key: str, at: datetime, ttl: timedelta) -> None:
        redis_key = self._key(key)
        await self.redis.zadd(redis_key, {at.isoformat(): _to_score(at)})
        await self.redis.expire(redis_key, int(ttl.total_seconds()))
