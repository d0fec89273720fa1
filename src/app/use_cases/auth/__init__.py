"""
Authentication Use Cases

Login, password reset, password change and Google account password flows.
"""

from .login_use_case import LoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .validate_reset_token_use_case import ValidateResetTokenUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .change_password_use_case import ChangePasswordUseCase
from .set_password_use_case import SetPasswordUseCase
from .get_password_status_use_case import GetPasswordStatusUseCase
from .dtos import (
    LoginResponse,
    AlternativeAuth,
    RequestPasswordResetResponse,
    ValidateResetTokenResponse,
    ConfirmPasswordResetResponse,
    ChangePasswordResponse,
    SetPasswordResponse,
    PasswordStatusResponse,
    PasswordPolicy,
    SecurityRecommendation,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ValidateResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    "ChangePasswordUseCase",
    "SetPasswordUseCase",
    "GetPasswordStatusUseCase",
    # DTOs - Responses
    "LoginResponse",
    "RequestPasswordResetResponse",
    "ValidateResetTokenResponse",
    "ConfirmPasswordResetResponse",
    "ChangePasswordResponse",
    "SetPasswordResponse",
    "PasswordStatusResponse",
    # DTOs - Nested Models
    "AlternativeAuth",
    "PasswordPolicy",
    "SecurityRecommendation",
]
