"""
Get Password Status Use Case

Describes how an account signs in, how old its password is and which
password rules apply.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.password_history_ledger import PASSWORD_HISTORY_LIMIT
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccountType, User
from src.domain.password_policy import MIN_PASSWORD_LENGTH, PASSWORD_REQUIREMENTS
from .dtos import PasswordPolicy, PasswordStatusResponse, SecurityRecommendation

logger = logging.getLogger(__name__)

STALE_PASSWORD_AGE = timedelta(days=180)
AGING_PASSWORD_AGE = timedelta(days=90)


class GetPasswordStatusUseCase:
    """
    Use case for reporting the password status of the current user.

    Business Rules:
    - Password age counts from the last password-affecting update
    - Older than 180 days is a high priority recommendation, older than 90 medium
    - Single sign-in method accounts are nudged towards a second one
    """

    def __init__(
        self, uow: UnitOfWork, clock: Clock, history_limit: int = PASSWORD_HISTORY_LIMIT
    ):
        self.uow = uow
        self.clock = clock
        self.history_limit = history_limit

    async def execute(self, user_id: UUID) -> Result[PasswordStatusResponse]:
        """
        Errors:
            - USER_NOT_FOUND: User missing or inactive
            - PASSWORD_STATUS_FAILED: Unexpected storage failure
        """
        async with self.uow:
            try:
                user = await self.uow.users.get_by_id(user_id)
            except Exception:
                logger.exception("Loading password status failed for user %s", user_id)
                return Return.err(
                    Error("PASSWORD_STATUS_FAILED", "Internal error while loading password status")
                )

            if user is None or not user.is_active:
                return Return.err(Error("USER_NOT_FOUND", "User not found or inactive"))

            last_changed = (user.updated_at or user.created_at) if user.password_hash else None

            return Return.ok(
                PasswordStatusResponse(
                    has_password=bool(user.password_hash),
                    has_google_auth=bool(user.google_id),
                    auth_methods=user.auth_methods,
                    account_type=user.account_type,
                    password_last_changed=last_changed,
                    security_recommendations=self._recommendations(user, last_changed),
                    password_policy=PasswordPolicy(
                        min_length=MIN_PASSWORD_LENGTH,
                        history_limit=self.history_limit,
                        requirements=PASSWORD_REQUIREMENTS,
                    ),
                )
            )

    def _recommendations(
        self, user: User, last_changed: Optional[datetime]
    ) -> List[SecurityRecommendation]:
        recommendations = []

        if last_changed is not None:
            age = self.clock.now() - last_changed
            if age > STALE_PASSWORD_AGE:
                recommendations.append(
                    SecurityRecommendation(
                        type="PASSWORD_AGE",
                        priority="high",
                        message="Your password is over 6 months old. Consider changing it.",
                    )
                )
            elif age > AGING_PASSWORD_AGE:
                recommendations.append(
                    SecurityRecommendation(
                        type="PASSWORD_AGE",
                        priority="medium",
                        message="Your password is over 3 months old. Consider changing it soon.",
                    )
                )

        if user.account_type == AccountType.EMAIL_ONLY:
            recommendations.append(
                SecurityRecommendation(
                    type="GOOGLE_AUTH",
                    priority="low",
                    message="Link your Google account for a second way to sign in.",
                )
            )
        elif user.account_type == AccountType.GOOGLE_ONLY:
            recommendations.append(
                SecurityRecommendation(
                    type="BACKUP_PASSWORD",
                    priority="low",
                    message="Set a password as a backup way to sign in.",
                )
            )

        return recommendations
