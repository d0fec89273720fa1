"""
Periodic purge of expired password reset tokens.
"""

import logging
from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from libs.result import Result

logger = logging.getLogger(__name__)


class TokenCleanupScheduler:
    """Runs the expired-token cleanup on an interval inside the event loop"""

    JOB_ID = "cleanup_expired_reset_tokens"

    def __init__(self, cleanup: Callable[[], Awaitable[Result]], interval_minutes: int = 60):
        self.cleanup = cleanup
        self.interval_minutes = interval_minutes
        self.scheduler = AsyncIOScheduler()
        self._started = False

    def start(self):
        """Start the scheduler"""
        if self._started:
            logger.warning("Scheduler already started")
            return

        self.scheduler.add_job(
            func=self._cleanup_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=self.JOB_ID,
            name="Delete expired password reset tokens",
            replace_existing=True,
        )
        self.scheduler.start()
        self._started = True
        logger.info("Token cleanup scheduled every %d minutes", self.interval_minutes)

    def stop(self):
        """Stop the scheduler"""
        if not self._started:
            return

        self.scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Token cleanup scheduler stopped")

    async def _cleanup_job(self):
        try:
            result = await self.cleanup()
        except Exception:
            logger.exception("Token cleanup job crashed")
            return

        if result.is_err():
            logger.error("Token cleanup job failed: %s", result.error.code)
        else:
            logger.info("Token cleanup job deleted %d token(s)", result.value.deleted_count)
