"""
Domain Enums

All enumeration types used across domain entities and use cases.
"""

from enum import Enum


class AccountType(str, Enum):
    """How a user is able to authenticate"""

    EMAIL_ONLY = "EMAIL_ONLY"
    GOOGLE_ONLY = "GOOGLE_ONLY"
    MIXED = "MIXED"


class AlternativeAuthMethod(str, Enum):
    """Sign-in method suggested when a password cannot be reset"""

    GOOGLE_OAUTH = "GOOGLE_OAUTH"


class AuthMethod(str, Enum):
    """A way the user can currently sign in"""

    EMAIL = "EMAIL"
    GOOGLE = "GOOGLE"


class StatisticsTimeframe(str, Enum):
    """Reporting window for password reset statistics"""

    day = "day"
    week = "week"
    month = "month"
