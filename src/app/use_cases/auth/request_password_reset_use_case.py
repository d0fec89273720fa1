"""
Request Password Reset Use Case

Handles issuing password reset tokens and mailing the reset link.
"""

import logging
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.mail_service import IMailService, send_notification
from src.app.services.rate_limiter import PasswordResetRateLimiter, normalize_email
from src.app.services.reset_token_store import DEFAULT_TOKEN_EXPIRY, ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccountType, AlternativeAuthMethod, AuditEvent, User
from .dtos import AlternativeAuth, RequestPasswordResetResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = (
    "If an account with that email exists, we've sent password reset instructions."
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Email is normalized (trimmed, lowercased) and matched case-insensitively
    - Rate limited per email; this is the only failure a caller can observe
    - No email enumeration: unknown and inactive accounts get the same
      response as real ones, and no token is issued for them
    - Google-only accounts are told to sign in with Google instead
    - Issuing a token invalidates every earlier token of the user
    - Mail delivery failures are logged, never reported
    - Every non-rate-limited request counts as an attempt
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: PasswordResetRateLimiter,
        mail_service: IMailService,
        clock: Clock,
        reset_url: str,
        token_expiry: timedelta = DEFAULT_TOKEN_EXPIRY,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.mail_service = mail_service
        self.clock = clock
        self.reset_url = reset_url
        self.token_store = ResetTokenStore(uow, clock, token_expiry)

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Email address the reset was requested for

        Returns:
            Result with a non-revealing response, or Error

        Errors:
            - RATE_LIMIT_EXCEEDED: Too many requests for this email
            - PASSWORD_RESET_FAILED: Unexpected storage failure
        """
        normalized_email = normalize_email(email)

        try:
            decision = await self.rate_limiter.check(normalized_email)
        except Exception:
            logger.exception("Rate limit check failed, allowing request")
        else:
            if not decision.allowed:
                logger.warning(
                    "Password reset rate limit exceeded (attempts today: %s)",
                    decision.attempts_today,
                )
                if decision.wait_minutes:
                    message = (
                        f"Please wait {decision.wait_minutes} minutes before "
                        "requesting another password reset."
                    )
                else:
                    message = "Too many password reset requests. Please try again later."
                return Return.err(
                    Error(
                        "RATE_LIMIT_EXCEEDED",
                        message,
                        details=decision.model_dump(exclude_none=True, exclude={"allowed"}),
                    )
                )

        try:
            return await self._initiate(normalized_email)
        except Exception:
            logger.exception("Password reset initiation failed")
            return Return.err(
                Error(
                    "PASSWORD_RESET_FAILED",
                    "Internal error during password reset initiation",
                )
            )
        finally:
            await self._record_attempt(normalized_email)

    async def _initiate(self, email: str) -> Result[RequestPasswordResetResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or not user.is_active:
                logger.info("Password reset requested for unknown or inactive account")
                return Return.ok(self._generic_response())

            if user.account_type == AccountType.GOOGLE_ONLY:
                logger.info("Password reset requested for Google-only user %s", user.id)
                return Return.ok(
                    RequestPasswordResetResponse(
                        status="sent",
                        message=GENERIC_MESSAGE,
                        email_sent=False,
                        can_reset_password=False,
                        account_type=AccountType.GOOGLE_ONLY,
                        alternative_auth=AlternativeAuth(
                            method=AlternativeAuthMethod.GOOGLE_OAUTH,
                            message="This account signs in with Google. "
                            "Use 'Continue with Google' to access it.",
                        ),
                    )
                )

            if not user.password_hash:
                logger.info("Password reset requested for user %s without credentials", user.id)
                return Return.ok(self._generic_response())

            token, reset_token = await self.token_store.issue(user.id, email)

            audit_event = AuditEvent(
                user_id=user.id,
                action="password_reset_requested",
                event_metadata={"email": email, "token_id": str(reset_token.id)},
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

        logger.info("Issued password reset token %s for user %s", reset_token.id, user.id)
        await self._send_reset_email(user, token, reset_token.expires_at)

        return Return.ok(self._generic_response())

    async def _send_reset_email(self, user: User, token: str, expires_at) -> None:
        expires_in = expires_at - self.clock.now()
        await send_notification(
            self.mail_service,
            to=user.email,
            subject="Reset your password",
            template="password_reset.html",
            context={
                "full_name": user.full_name or user.email,
                "reset_link": f"{self.reset_url}?token={token}",
                "expires_in_minutes": max(1, int(expires_in.total_seconds() // 60)),
            },
        )

    async def _record_attempt(self, email: str) -> None:
        try:
            await self.rate_limiter.record_attempt(email)
        except Exception:
            logger.exception("Failed to record password reset attempt")

    @staticmethod
    def _generic_response() -> RequestPasswordResetResponse:
        return RequestPasswordResetResponse(status="sent", message=GENERIC_MESSAGE)
