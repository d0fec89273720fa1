"""
PasswordResetToken Entity

Single-use, expiring password reset grants.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - one outstanding password reset grant.

    Business Rules:
    - Valid iff used_at is null and now < expires_at
    - At most one valid token per user: issuing a new one deletes the others
    - Token is stored as SHA-256 hash of a 32-byte random value
    - Consumed exactly once, by a conditional update on used_at
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output
    email: str = Field(max_length=255)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_created_at", "created_at"),
    )

    def is_valid(self, now: datetime) -> bool:
        return self.used_at is None and now < self.expires_at
