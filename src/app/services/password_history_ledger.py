"""
Password History Ledger

Remembers the most recent password hashes of each user and answers
"was this password used recently?".
"""

import logging
from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordHistory

logger = logging.getLogger(__name__)

PASSWORD_HISTORY_LIMIT = 5


class PasswordHistoryLedger:
    """
    Business Rules:
    - Only the newest `limit` hashes per user are kept
    - Reuse check fails open: a storage error answers "not used"
    - Recording never raises; a failed insert/trim is logged and rolled back
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: IPasswordHasher,
        clock: Clock,
        limit: int = PASSWORD_HISTORY_LIMIT,
    ):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock
        self.limit = limit

    async def was_recently_used(self, user_id: UUID, candidate_password: str) -> bool:
        try:
            entries = await self.uow.password_history.get_recent_by_user_id(
                user_id, self.limit
            )
        except Exception:
            # fail open
            logger.exception(
                "Password history lookup failed for user %s, allowing password", user_id
            )
            return False

        for entry in entries:
            if self.hasher.verify(candidate_password, entry.password_hash):
                return True
        return False

    async def record(self, user_id: UUID, password_hash: str) -> bool:
        """
        Append a hash and trim the user's history, in its own commit.

        Returns:
            True if the history was updated, False if it failed
        """
        try:
            await self.uow.password_history.create(
                PasswordHistory(
                    user_id=user_id,
                    password_hash=password_hash,
                    created_at=self.clock.now(),
                )
            )
            trimmed = await self.uow.password_history.trim_to_recent(user_id, self.limit)
            await self.uow.commit()
        except Exception:
            logger.exception("Failed to record password history for user %s", user_id)
            try:
                await self.uow.rollback()
            except Exception:
                logger.exception("Rollback after history failure failed for user %s", user_id)
            return False

        if trimmed:
            logger.debug("Trimmed %d password history entries for user %s", trimmed, user_id)
        return True
