"""
Validate Reset Token Use Case

Lets the reset page check a token before asking for a new password.
"""

import logging
import math
from typing import Tuple

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordResetToken, User
from .dtos import ValidateResetTokenResponse

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = Error(
    "INVALID_RESET_TOKEN",
    "Invalid or expired password reset token",
)
ACCOUNT_DEACTIVATED = Error(
    "ACCOUNT_DEACTIVATED",
    "This account has been deactivated",
)


async def resolve_reset_token(
    uow: UnitOfWork, token_store: ResetTokenStore, token: str
) -> Result[Tuple[PasswordResetToken, User]]:
    """
    Find the valid token and its active owner.

    Unknown, expired and used tokens all yield INVALID_RESET_TOKEN.
    Must be called inside an entered unit of work.
    """
    reset_token = await token_store.find_valid(token)
    if reset_token is None:
        return Return.err(INVALID_RESET_TOKEN)

    user = await uow.users.get_by_id(reset_token.user_id)
    if user is None or not user.is_active:
        return Return.err(ACCOUNT_DEACTIVATED)

    return Return.ok((reset_token, user))


class ValidateResetTokenUseCase:
    """
    Use case for checking a password reset token.

    Business Rules:
    - Unknown, expired and used tokens are reported identically
    - Tokens of deactivated accounts are rejected
    - time_remaining is whole seconds until expiry, never negative
    - Read-only: validation does not consume the token
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock
        self.token_store = ResetTokenStore(uow, clock)

    async def execute(self, token: str) -> Result[ValidateResetTokenResponse]:
        """
        Execute validate reset token use case.

        Errors:
            - INVALID_RESET_TOKEN: Token not found, expired or already used
            - ACCOUNT_DEACTIVATED: Token owner is inactive
            - TOKEN_VALIDATION_FAILED: Unexpected storage failure
        """
        try:
            async with self.uow:
                resolved = await resolve_reset_token(self.uow, self.token_store, token)
                if resolved.is_err():
                    return Return.err(resolved.error)

                reset_token, user = resolved.value
                remaining = (reset_token.expires_at - self.clock.now()).total_seconds()

                return Return.ok(
                    ValidateResetTokenResponse(
                        is_valid=True,
                        email=user.email,
                        expires_at=reset_token.expires_at,
                        time_remaining=max(0, math.floor(remaining)),
                    )
                )
        except Exception:
            logger.exception("Reset token validation failed")
            return Return.err(
                Error("TOKEN_VALIDATION_FAILED", "Internal error during token validation")
            )
