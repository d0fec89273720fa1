import logging
from uuid import UUID

from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SessionInvalidator:
    """Terminates a user's sessions after a credential change, in its own commit"""

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def invalidate_all(self, user_id: UUID) -> int:
        count = await self.uow.sessions.revoke_all_by_user_id(user_id, self.clock.now())
        await self.uow.commit()
        logger.info("Revoked %d session(s) for user %s", count, user_id)
        return count

    async def invalidate_all_except(self, user_id: UUID, session_id: UUID) -> int:
        count = await self.uow.sessions.revoke_all_except_session(
            user_id, session_id, self.clock.now()
        )
        await self.uow.commit()
        logger.info(
            "Revoked %d other session(s) for user %s, kept %s", count, user_id, session_id
        )
        return count
