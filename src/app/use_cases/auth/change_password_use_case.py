"""
Change Password Use Case

Lets a signed-in user replace their password.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.mail_service import IMailService, send_notification
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.password_history_ledger import (
    PASSWORD_HISTORY_LIMIT,
    PasswordHistoryLedger,
)
from src.app.services.rate_limiter import PasswordChangeRateLimiter, RateLimitDecision
from src.app.services.session_invalidator import SessionInvalidator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.password_policy import PASSWORD_REQUIREMENTS, validate_password_strength
from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the password of an authenticated user.

    Business Rules:
    - Attempts are rate limited per user (5 per 15 minutes by default) and
      counted before any validation
    - Current password must be verified
    - Same strength and history rules as password reset
    - The calling session stays signed in; others are revoked on request
    - History, session revocation and mail are best-effort after the commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: IPasswordHasher,
        mail_service: IMailService,
        rate_limiter: PasswordChangeRateLimiter,
        clock: Clock,
        history_limit: int = PASSWORD_HISTORY_LIMIT,
    ):
        self.uow = uow
        self.hasher = hasher
        self.mail_service = mail_service
        self.rate_limiter = rate_limiter
        self.clock = clock
        self.history = PasswordHistoryLedger(uow, hasher, clock, history_limit)
        self.session_invalidator = SessionInvalidator(uow, clock)

    async def execute(
        self,
        user_id: UUID,
        session_id: UUID,
        current_password: str,
        new_password: str,
        confirm_password: str,
        invalidate_other_sessions: bool = True,
    ) -> Result[ChangePasswordResponse]:
        """
        Execute change password use case.

        Errors:
            - RATE_LIMIT_EXCEEDED: Too many attempts in the window
            - PASSWORD_MISMATCH: New password and confirmation differ
            - PASSWORD_TOO_WEAK: New password violates strength rules
            - USER_NOT_FOUND: User missing or inactive
            - NO_PASSWORD_EXISTS: Account signs in with Google only
            - INVALID_CURRENT_PASSWORD: Current password is wrong
            - PASSWORD_REUSED: New password matches a recent one
            - PASSWORD_CHANGE_FAILED: Unexpected storage failure
        """
        decision = await self._acquire_attempt(user_id)
        if decision is not None and not decision.allowed:
            return Return.err(
                Error(
                    "RATE_LIMIT_EXCEEDED",
                    "Too many password change attempts. Please try again later.",
                    details={
                        "retry_after": decision.retry_after,
                        "remaining_attempts": 0,
                    },
                )
            )
        remaining = decision.remaining_attempts if decision is not None else None

        if new_password != confirm_password:
            return Return.err(
                Error(
                    "PASSWORD_MISMATCH",
                    "New password and confirmation do not match",
                    details={"field": "confirm_password"},
                )
            )

        strength = validate_password_strength(new_password)
        if not strength.is_valid:
            return Return.err(
                Error(
                    "PASSWORD_TOO_WEAK",
                    "Password does not meet security requirements",
                    details={
                        "violations": strength.violations,
                        "requirements": PASSWORD_REQUIREMENTS,
                    },
                )
            )

        async with self.uow:
            try:
                user = await self.uow.users.get_by_id(user_id)
                if user is None or not user.is_active:
                    return Return.err(Error("USER_NOT_FOUND", "User not found or inactive"))

                if not user.password_hash:
                    return Return.err(
                        Error(
                            "NO_PASSWORD_EXISTS",
                            "Account does not have a password",
                            details={"account_type": user.account_type.value},
                        )
                    )

                if not self.hasher.verify(current_password, user.password_hash):
                    return Return.err(
                        Error(
                            "INVALID_CURRENT_PASSWORD",
                            "Current password is incorrect",
                            details={
                                "field": "current_password",
                                "remaining_attempts": remaining,
                            },
                        )
                    )

                if await self.history.was_recently_used(user.id, new_password):
                    return Return.err(
                        Error(
                            "PASSWORD_REUSED",
                            "Please choose a password you haven't used recently",
                            details={"history_limit": self.history.limit},
                        )
                    )

                password_hash = self.hasher.hash(new_password)
                user.password_hash = password_hash
                user.updated_at = self.clock.now()
                await self.uow.users.update(user)

                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="password_changed",
                        event_metadata={"session_id": str(session_id)},
                    )
                )
                await self.uow.commit()

                # A later rollback expires loaded entities
                email, full_name = user.email, user.full_name
            except Exception:
                logger.exception("Password change failed for user %s", user_id)
                return Return.err(
                    Error("PASSWORD_CHANGE_FAILED", "Internal error during password change")
                )

            logger.info("Password changed for user %s", user_id)

            history_updated = await self.history.record(user_id, password_hash)

            revoked = 0
            if invalidate_other_sessions:
                try:
                    revoked = await self.session_invalidator.invalidate_all_except(
                        user_id, session_id
                    )
                except Exception:
                    logger.exception("Failed to revoke other sessions for user %s", user_id)
                    await self.uow.rollback()

        await send_notification(
            self.mail_service,
            to=email,
            subject="Your password was changed",
            template="password_changed.html",
            context={
                "full_name": full_name or email,
                "changed_at": self.clock.now().strftime("%Y-%m-%d %H:%M UTC"),
                "other_sessions_signed_out": invalidate_other_sessions,
            },
        )

        return Return.ok(
            ChangePasswordResponse(
                status="success",
                message="Password updated successfully",
                other_sessions_revoked=revoked,
                password_history_updated=history_updated,
            )
        )

    async def _acquire_attempt(self, user_id: UUID) -> Optional[RateLimitDecision]:
        try:
            return await self.rate_limiter.acquire(user_id)
        except Exception:
            logger.exception("Password change rate limit check failed, allowing attempt")
            return None
