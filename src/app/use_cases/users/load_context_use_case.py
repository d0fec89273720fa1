"""
Load Context Use Case

Loads the current user from JWT claims and checks that their session is live.
"""

from typing import Any, Dict
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.unit_of_work import UnitOfWork


class LoadContextUseCase:
    """
    Use case for loading the current user context.

    Business Rules:
    - JWT payload provides user_id and session_id
    - Session must exist, belong to the user, and be neither revoked nor expired
    - User must exist and be active
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def execute(self, user_id: UUID, session_id: UUID) -> Result[Dict[str, Any]]:
        """
        Execute load context use case.

        Args:
            user_id: User UUID from JWT
            session_id: Session UUID from JWT

        Returns:
            Result with user and session context, or Error
        """
        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if (
                session is None
                or session.user_id != user_id
                or not session.is_active(self.clock.now())
            ):
                return Return.err(
                    Error("SESSION_REVOKED", "Session has been revoked or has expired")
                )

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not user.is_active:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            return Return.ok(
                {
                    "user": {
                        "id": str(user.id),
                        "email": user.email,
                        "full_name": user.full_name,
                        "email_verified": user.email_verified,
                        "account_type": user.account_type.value,
                    },
                    "session": {
                        "id": str(session.id),
                        "expires_at": session.expires_at.isoformat(),
                    },
                }
            )
