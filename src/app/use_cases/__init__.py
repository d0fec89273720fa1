"""
Use Cases

Organized into domain folders:
- auth/: Login, password reset and password change
- users/: Current user context
- admin/: Reset token maintenance and reporting
"""

from .auth import (
    LoginUseCase,
    RequestPasswordResetUseCase,
    ValidateResetTokenUseCase,
    ConfirmPasswordResetUseCase,
    ChangePasswordUseCase,
)
from .users import LoadContextUseCase
from .admin import CleanupExpiredResetTokensUseCase, GetResetStatisticsUseCase

__all__ = [
    # Auth
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ValidateResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    "ChangePasswordUseCase",
    # Users
    "LoadContextUseCase",
    # Admin
    "CleanupExpiredResetTokensUseCase",
    "GetResetStatisticsUseCase",
]
