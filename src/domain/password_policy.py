"""
Password strength rules.

Every rule is checked independently so the caller gets the full list of
violations in one round trip.
"""

import re
from dataclasses import dataclass, field
from typing import List

MIN_PASSWORD_LENGTH = 8

PASSWORD_REQUIREMENTS = [
    f"At least {MIN_PASSWORD_LENGTH} characters long",
    "Contains at least one uppercase letter",
    "Contains at least one lowercase letter",
    "Contains at least one number",
    "Contains at least one special character",
]

_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class PasswordStrength:
    is_valid: bool
    violations: List[str] = field(default_factory=list)


def validate_password_strength(password: str) -> PasswordStrength:
    violations = []

    if len(password) < MIN_PASSWORD_LENGTH:
        violations.append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if not _UPPERCASE.search(password):
        violations.append("Password must contain at least one uppercase letter")
    if not _LOWERCASE.search(password):
        violations.append("Password must contain at least one lowercase letter")
    if not _DIGIT.search(password):
        violations.append("Password must contain at least one number")
    if not _SPECIAL.search(password):
        violations.append("Password must contain at least one special character")

    return PasswordStrength(is_valid=not violations, violations=violations)
