"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import AccountType, AlternativeAuthMethod, AuthMethod


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    token_type: str = "bearer"
    session_id: str
    expires_at: datetime


class AlternativeAuth(BaseModel):
    """Sign-in suggestion for accounts without a password"""

    method: AlternativeAuthMethod
    message: str


class RequestPasswordResetResponse(BaseModel):
    """
    Response for request password reset use case.

    Identical for existing, unknown and inactive accounts. Only Google-only
    accounts get can_reset_password=False plus an alternative sign-in method.
    """

    status: str
    message: str
    email_sent: bool = True
    can_reset_password: bool = True
    account_type: Optional[AccountType] = None
    alternative_auth: Optional[AlternativeAuth] = None


class ValidateResetTokenResponse(BaseModel):
    """Response for validate reset token use case"""

    is_valid: bool
    email: str
    expires_at: datetime
    time_remaining: int  # seconds


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str
    password_reset: bool
    sessions_invalidated: bool
    sessions_revoked: int
    password_history_updated: bool


class ChangePasswordResponse(BaseModel):
    """Response for change password use case"""

    status: str
    message: str
    other_sessions_revoked: int
    password_history_updated: bool


class SetPasswordResponse(BaseModel):
    """Response for set password use case (Google-only accounts)"""

    status: str
    message: str
    account_type: AccountType
    auth_methods: List[AuthMethod]
    mixed_auth_enabled: bool
    password_history_updated: bool


class SecurityRecommendation(BaseModel):
    type: str
    priority: str  # low, medium or high
    message: str


class PasswordPolicy(BaseModel):
    """Password rules the client can show before the user types"""

    min_length: int
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_special_chars: bool = True
    history_limit: int
    requirements: List[str]


class PasswordStatusResponse(BaseModel):
    """Response for get password status use case"""

    has_password: bool
    has_google_auth: bool
    auth_methods: List[AuthMethod]
    account_type: AccountType
    password_last_changed: Optional[datetime] = None
    security_recommendations: List[SecurityRecommendation]
    password_policy: PasswordPolicy
