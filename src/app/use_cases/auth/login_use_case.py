"""
Login Use Case

Handles email/password authentication and returns session-bound JWT tokens.
"""

import logging
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.rate_limiter import normalize_email
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Session
from src.api.utils.jwt import generate_jwt
from .dtos import LoginResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Accounts without a password (Google-only) cannot log in with one
    - User must be active
    - Creates a new session; its id is carried in the JWT
    - Updates user.last_login_at
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: IPasswordHasher,
        clock: Clock,
        session_ttl: timedelta = timedelta(days=30),
    ):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock
        self.session_ttl = session_ttl

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing the access token, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None or not user.password_hash:
                # Hash anyway so unknown emails take as long as wrong passwords
                self.hasher.hash(password)
                return Return.err(INVALID_CREDENTIALS)

            if not self.hasher.verify(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            if not user.is_active:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            now = self.clock.now()
            session = Session(
                user_id=user.id,
                created_at=now,
                expires_at=now + self.session_ttl,
            )
            session = await self.uow.sessions.create(session)

            user.last_login_at = now
            await self.uow.users.update(user)

            audit = AuditEvent(
                user_id=user.id,
                action="login",
                event_metadata={"session_id": str(session.id)},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info("User %s logged in (session %s)", user.id, session.id)

            return Return.ok(
                LoginResponse(
                    access_token=generate_jwt(user.id, session.id),
                    session_id=str(session.id),
                    expires_at=session.expires_at,
                )
            )
