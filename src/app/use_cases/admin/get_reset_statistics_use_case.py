"""
Use Case: Password Reset Statistics

Reports reset activity for the last day, week or month.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.reset_token_store import ResetStatistics, ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import StatisticsTimeframe

logger = logging.getLogger(__name__)


class GetResetStatisticsUseCase:
    """
    Counts reset tokens for a reporting window.

    - total_requests: tokens created in the window
    - successful_resets: tokens used in the window
    - expired_tokens: tokens created in the window that expired unused
    - active_tokens: tokens valid right now, regardless of window
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.token_store = ResetTokenStore(uow, clock)

    async def execute(
        self, timeframe: StatisticsTimeframe = StatisticsTimeframe.day
    ) -> Result[ResetStatistics]:
        """
        Errors:
            - STATISTICS_FAILED: Unexpected storage failure
        """
        try:
            async with self.uow:
                statistics = await self.token_store.statistics(timeframe)
        except Exception:
            logger.exception("Failed to compute password reset statistics")
            return Return.err(
                Error("STATISTICS_FAILED", "Failed to get password reset statistics")
            )

        return Return.ok(statistics)
