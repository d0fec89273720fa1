"""
Credential rate limiting.

Password reset requests use a per-email sliding window: at most
`max_attempts` requests per 24 hours and a cooldown between consecutive
requests. Password changes use a per-user window of 5 attempts per 15
minutes. Attempts live in an IAttemptStore so a multi-instance deployment
can share them (Redis) while a single process can keep them in memory.
"""

import logging
import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.clock import Clock

logger = logging.getLogger(__name__)

DAILY_WINDOW = timedelta(hours=24)
DEFAULT_COOLDOWN = timedelta(minutes=5)
DEFAULT_MAX_ATTEMPTS = 3

PASSWORD_CHANGE_WINDOW = timedelta(minutes=15)
PASSWORD_CHANGE_MAX_ATTEMPTS = 5


class RateLimitDecision(BaseModel):
    allowed: bool
    wait_minutes: Optional[int] = None
    attempts_today: Optional[int] = None
    retry_after: Optional[int] = None  # seconds
    remaining_attempts: Optional[int] = None


class IAttemptStore(ABC):
    """Storage for attempt timestamps keyed by normalized email or user id"""

    @abstractmethod
    async def get_attempts(self, key: str, since: datetime) -> List[datetime]:
        """
        Drop attempts at or before `since` and return the rest, newest first.
        """
        pass

    @abstractmethod
    async def add_attempt(self, key: str, at: datetime, ttl: timedelta) -> None:
        """Record an attempt; the record may be discarded after `ttl`"""
        pass


def normalize_email(email: str) -> str:
    return email.strip().lower()


class PasswordResetRateLimiter:
    """
    Business Rules:
    - No more than `max_attempts` attempts within a rolling 24 hour window
    - No two attempts within `cooldown` of each other
    - check() never records; callers record explicitly after an allowed check,
      so denied requests do not extend the lockout
    """

    def __init__(
        self,
        store: IAttemptStore,
        clock: Clock,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        window: timedelta = DAILY_WINDOW,
    ):
        self.store = store
        self.clock = clock
        self.max_attempts = max_attempts
        self.cooldown = cooldown
        self.window = window

    async def check(self, email: str) -> RateLimitDecision:
        now = self.clock.now()
        attempts = await self.store.get_attempts(normalize_email(email), now - self.window)

        if len(attempts) >= self.max_attempts:
            return RateLimitDecision(allowed=False, attempts_today=len(attempts))

        if attempts:
            elapsed = now - attempts[0]
            if elapsed < self.cooldown:
                remaining = (self.cooldown - elapsed).total_seconds()
                return RateLimitDecision(
                    allowed=False,
                    wait_minutes=math.ceil(remaining / 60),
                    attempts_today=len(attempts),
                )

        return RateLimitDecision(allowed=True, attempts_today=len(attempts))

    async def record_attempt(self, email: str) -> None:
        await self.store.add_attempt(normalize_email(email), self.clock.now(), self.window)


class PasswordChangeRateLimiter:
    """
    Business Rules:
    - No more than `max_attempts` password change attempts per user within
      a rolling `window`
    - Every allowed attempt counts, successful or not
    - A denied attempt reports when the oldest attempt leaves the window
    """

    def __init__(
        self,
        store: IAttemptStore,
        clock: Clock,
        max_attempts: int = PASSWORD_CHANGE_MAX_ATTEMPTS,
        window: timedelta = PASSWORD_CHANGE_WINDOW,
    ):
        self.store = store
        self.clock = clock
        self.max_attempts = max_attempts
        self.window = window

    async def acquire(self, user_id: UUID) -> RateLimitDecision:
        """Check the user's window and, when allowed, record this attempt"""
        now = self.clock.now()
        key = str(user_id)
        attempts = await self.store.get_attempts(key, now - self.window)

        if len(attempts) >= self.max_attempts:
            oldest = attempts[-1]
            retry_after = math.ceil((oldest + self.window - now).total_seconds())
            logger.warning("Password change rate limit hit for user %s", user_id)
            return RateLimitDecision(
                allowed=False,
                retry_after=max(retry_after, 1),
                remaining_attempts=0,
            )

        await self.store.add_attempt(key, now, self.window)
        return RateLimitDecision(
            allowed=True,
            remaining_attempts=self.max_attempts - len(attempts) - 1,
        )
