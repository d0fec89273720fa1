"""
Use Case: Cleanup Expired Reset Tokens

Deletes password reset tokens whose expiry has passed. Run by the admin API
and by the periodic cleanup job.
"""

import logging

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CleanupResetTokensResponse(BaseModel):
    """Response DTO for CleanupExpiredResetTokensUseCase"""

    deleted_count: int


class CleanupExpiredResetTokensUseCase:
    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.token_store = ResetTokenStore(uow, clock)

    async def execute(self) -> Result[CleanupResetTokensResponse]:
        """
        Errors:
            - CLEANUP_FAILED: Unexpected storage failure
        """
        try:
            async with self.uow:
                deleted = await self.token_store.purge_expired()
                await self.uow.commit()
        except Exception:
            logger.exception("Expired reset token cleanup failed")
            return Return.err(Error("CLEANUP_FAILED", "Failed to clean up expired tokens"))

        logger.info("Deleted %d expired or used password reset token(s)", deleted)
        return Return.ok(CleanupResetTokensResponse(deleted_count=deleted))
