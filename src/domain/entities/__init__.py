"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AccountType,
    AlternativeAuthMethod,
    AuthMethod,
    StatisticsTimeframe,
)

# Export all entities
from .user import User
from .session import Session
from .audit_event import AuditEvent
from .password_reset_token import PasswordResetToken
from .password_history import PasswordHistory

__all__ = [
    # Enums
    "AccountType",
    "AlternativeAuthMethod",
    "AuthMethod",
    "StatisticsTimeframe",
    # Entities
    "User",
    "Session",
    "AuditEvent",
    "PasswordResetToken",
    "PasswordHistory",
]
