"""
Set Password Use Case

Adds a password to an account that so far signs in with Google only.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.mail_service import IMailService, send_notification
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.password_history_ledger import (
    PASSWORD_HISTORY_LIMIT,
    PasswordHistoryLedger,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from src.domain.password_policy import PASSWORD_REQUIREMENTS, validate_password_strength
from .dtos import SetPasswordResponse

logger = logging.getLogger(__name__)


class SetPasswordUseCase:
    """
    Use case for giving a Google-only account a password.

    Business Rules:
    - Only accounts linked to Google and without a password qualify
    - Same strength rules as every other password flow
    - The account becomes MIXED: both email and Google sign-in work
    - History entry and security mail are best-effort after the commit
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
        self.history = PasswordHistoryLedger(uow, hasher, clock, history_limit)

    async def execute(
        self, user_id: UUID, new_password: str, confirm_password: str
    ) -> Result[SetPasswordResponse]:
        """
        Execute set password use case.

        Errors:
            - PASSWORD_MISMATCH: Password and confirmation differ
            - PASSWORD_TOO_WEAK: Password violates strength rules
            - USER_NOT_FOUND: User missing or inactive
            - PASSWORD_ALREADY_EXISTS: Account already has a password
            - GOOGLE_ACCOUNT_REQUIRED: Account is not linked to Google
            - SET_PASSWORD_FAILED: Unexpected storage failure
        """
        if new_password != confirm_password:
            return Return.err(
                Error(
                    "PASSWORD_MISMATCH",
                    "Password and confirmation do not match",
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

                if user.password_hash:
                    return Return.err(
                        Error(
                            "PASSWORD_ALREADY_EXISTS",
                            "Account already has a password. Use change password instead.",
                        )
                    )

                if not user.google_id:
                    return Return.err(
                        Error(
                            "GOOGLE_ACCOUNT_REQUIRED",
                            "Setting a first password requires a Google-linked account",
                        )
                    )

                password_hash = self.hasher.hash(new_password)
                user.password_hash = password_hash
                user.updated_at = self.clock.now()
                await self.uow.users.update(user)

                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="password_set",
                        event_metadata={"account_type": user.account_type.value},
                    )
                )
                await self.uow.commit()

                account_type, auth_methods = user.account_type, user.auth_methods
                email, full_name = user.email, user.full_name
            except Exception:
                logger.exception("Setting password failed for user %s", user_id)
                return Return.err(
                    Error("SET_PASSWORD_FAILED", "Internal error while setting password")
                )

            logger.info("Password set for Google account %s", user_id)

            history_updated = await self.history.record(user_id, password_hash)

        await send_notification(
            self.mail_service,
            to=email,
            subject="Password set - email sign-in enabled",
            template="password_set.html",
            context={
                "full_name": full_name or email,
                "set_at": self.clock.now().strftime("%Y-%m-%d %H:%M UTC"),
            },
        )

        return Return.ok(
            SetPasswordResponse(
                status="success",
                message="Password set. You can now sign in with email or Google.",
                account_type=account_type,
                auth_methods=auth_methods,
                mixed_auth_enabled=True,
                password_history_updated=history_updated,
            )
        )
