"""
Confirm Password Reset Use Case

Sets a new password with a reset token and cleans up the old credentials.
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
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.session_invalidator import SessionInvalidator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.password_policy import PASSWORD_REQUIREMENTS, validate_password_strength
from .dtos import ConfirmPasswordResetResponse
from .validate_reset_token_use_case import INVALID_RESET_TOKEN, resolve_reset_token

logger = logging.getLogger(__name__)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Mismatch, strength, token and reuse checks run before any write
    - Token is consumed by a conditional update together with the password
      write, so one token completes at most one reset
    - Password is hashed with bcrypt (cost factor 12)
    - After the password commit, history, session revocation and the
      confirmation mail are best-effort and never undo the change
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: IPasswordHasher,
        mail_service: IMailService,
        clock: Clock,
        history_limit: int = PASSWORD_HISTORY_LIMIT,
    ):
        self.uow = uow
        self.hasher = hasher
        self.mail_service = mail_service
        self.clock = clock
        self.token_store = ResetTokenStore(uow, clock)
        self.history = PasswordHistoryLedger(uow, hasher, clock, history_limit)
        self.session_invalidator = SessionInvalidator(uow, clock)

    async def execute(
        self, token: str, new_password: str, confirm_password: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set
            confirm_password: Repeat of the new password

        Returns:
            Result with reset confirmation, or Error

        Errors:
            - PASSWORD_MISMATCH: Passwords do not match
            - PASSWORD_TOO_WEAK: Password violates strength rules (details.violations)
            - INVALID_RESET_TOKEN: Token not found, expired or already used
            - ACCOUNT_DEACTIVATED: Token owner is inactive
            - PASSWORD_REUSED: Password matches one of the recent passwords
            - PASSWORD_RESET_FAILED: Unexpected storage failure
        """
        if new_password != confirm_password:
            return Return.err(
                Error("PASSWORD_MISMATCH", "Password confirmation does not match new password")
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
                resolved = await resolve_reset_token(self.uow, self.token_store, token)
                if resolved.is_err():
                    return Return.err(resolved.error)
                reset_token, user = resolved.value

                if await self.history.was_recently_used(user.id, new_password):
                    return Return.err(
                        Error(
                            "PASSWORD_REUSED",
                            f"Password was used recently. Choose a password "
                            f"different from your last {self.history.limit}.",
                            details={"history_limit": self.history.limit},
                        )
                    )

                password_hash = self.hasher.hash(new_password)

                if not await self.token_store.consume(reset_token.id):
                    logger.warning("Reset token %s was consumed concurrently", reset_token.id)
                    return Return.err(INVALID_RESET_TOKEN)

                user.password_hash = password_hash
                user.updated_at = self.clock.now()
                await self.uow.users.update(user)

                audit_event = AuditEvent(
                    user_id=user.id,
                    action="password_reset_completed",
                    event_metadata={"token_id": str(reset_token.id)},
                )
                await self.uow.audit_events.create(audit_event)

                await self.uow.commit()

                # A later rollback expires loaded entities
                user_id, email, full_name = user.id, user.email, user.full_name
            except Exception:
                logger.exception("Password reset failed")
                return Return.err(
                    Error("PASSWORD_RESET_FAILED", "Internal error during password reset")
                )

            logger.info("Password reset completed for user %s", user_id)

            history_updated = await self.history.record(user_id, password_hash)
            sessions_revoked = await self._invalidate_sessions(user_id)

        await self._send_confirmation(email, full_name, sessions_revoked is not None)

        return Return.ok(
            ConfirmPasswordResetResponse(
                status="success",
                message="Your password has been reset. Please log in with your new password.",
                password_reset=True,
                sessions_invalidated=sessions_revoked is not None,
                sessions_revoked=sessions_revoked or 0,
                password_history_updated=history_updated,
            )
        )

    async def _invalidate_sessions(self, user_id: UUID) -> Optional[int]:
        try:
            return await self.session_invalidator.invalidate_all(user_id)
        except Exception:
            logger.exception("Failed to revoke sessions for user %s after reset", user_id)
            await self.uow.rollback()
            return None

    async def _send_confirmation(
        self, email: str, full_name: Optional[str], sessions_signed_out: bool
    ) -> None:
        await send_notification(
            self.mail_service,
            to=email,
            subject="Your password was changed",
            template="password_changed.html",
            context={
                "full_name": full_name or email,
                "changed_at": self.clock.now().strftime("%Y-%m-%d %H:%M UTC"),
                "other_sessions_signed_out": sessions_signed_out,
            },
        )
