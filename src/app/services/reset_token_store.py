"""
Reset Token Store

Owns every PasswordResetToken row: issuance, lookup, consumption, purge and
reporting. Use cases never touch the token table directly.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

from pydantic import BaseModel

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordResetToken, StatisticsTimeframe
from src.domain.tokens import generate_reset_token, hash_token

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_EXPIRY = timedelta(hours=1)

TIMEFRAME_WINDOWS = {
    StatisticsTimeframe.day: timedelta(days=1),
    StatisticsTimeframe.week: timedelta(days=7),
    StatisticsTimeframe.month: timedelta(days=30),
}


class ResetStatistics(BaseModel):
    """Token counts for a reporting window"""

    timeframe: StatisticsTimeframe
    since: datetime
    total_requests: int
    successful_resets: int
    expired_tokens: int
    active_tokens: int


class ResetTokenStore:
    """
    Business Rules:
    - At most one valid token per user: issue() deletes the user's other tokens
    - Only the SHA-256 of a token is stored
    - Unknown, expired and used tokens are indistinguishable to callers
    - consume() is a single conditional update, so a token is consumed at most once
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        expiry: timedelta = DEFAULT_TOKEN_EXPIRY,
    ):
        self.uow = uow
        self.clock = clock
        self.expiry = expiry

    async def issue(self, user_id: UUID, email: str) -> Tuple[str, PasswordResetToken]:
        """
        Replace the user's tokens with a fresh one.

        Returns:
            Tuple of (plain token for the email link, stored token record)
        """
        replaced = await self.uow.password_reset_tokens.delete_by_user_id(user_id)
        if replaced:
            logger.info("Invalidated %d previous reset token(s) for user %s", replaced, user_id)

        token = generate_reset_token()
        now = self.clock.now()
        record = PasswordResetToken(
            user_id=user_id,
            token_hash=hash_token(token),
            email=email,
            created_at=now,
            expires_at=now + self.expiry,
        )
        record = await self.uow.password_reset_tokens.create(record)
        return token, record

    async def find_valid(self, token: str) -> Optional[PasswordResetToken]:
        record = await self.uow.password_reset_tokens.get_by_token_hash(hash_token(token))
        if record is None or not record.is_valid(self.clock.now()):
            return None
        return record

    async def consume(self, token_id: UUID) -> bool:
        return await self.uow.password_reset_tokens.consume(token_id, self.clock.now())

    async def mark_used(self, token_id: UUID) -> None:
        await self.uow.password_reset_tokens.mark_used(token_id, self.clock.now())

    async def purge_expired(self) -> int:
        return await self.uow.password_reset_tokens.delete_expired(self.clock.now())

    async def statistics(self, timeframe: StatisticsTimeframe) -> ResetStatistics:
        now = self.clock.now()
        since = now - TIMEFRAME_WINDOWS[timeframe]
        tokens = self.uow.password_reset_tokens

        return ResetStatistics(
            timeframe=timeframe,
            since=since,
            total_requests=await tokens.count_created_since(since),
            successful_resets=await tokens.count_used_since(since),
            expired_tokens=await tokens.count_expired_unused(since, now),
            active_tokens=await tokens.count_active(now),
        )
