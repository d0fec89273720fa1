"""
User Entity

Represents a hotel staff member or guest account.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import AccountType, AuthMethod


class User(SQLModel, table=True):
    """
    User entity - owned by the identity subsystem.

    Business Rules:
    - Email must be unique and is matched case-insensitively
    - Password stored as bcrypt hash (cost factor 12); absent for Google-only accounts
    - google_id is set once the account is linked to Google OAuth
    - Inactive users can neither log in nor reset their password
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output is 60 chars
    google_id: Optional[str] = Field(default=None, unique=True, max_length=255)

    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_is_active", "is_active"),)

    @property
    def auth_methods(self) -> List[AuthMethod]:
        methods = []
        if self.password_hash:
            methods.append(AuthMethod.EMAIL)
        if self.google_id:
            methods.append(AuthMethod.GOOGLE)
        return methods

    @property
    def account_type(self) -> AccountType:
        if not self.password_hash and self.google_id:
            return AccountType.GOOGLE_ONLY
        if self.password_hash and self.google_id:
            return AccountType.MIXED
        return AccountType.EMAIL_ONLY
