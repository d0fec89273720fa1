"""
PasswordHistory Entity

Previously set password hashes, used to block immediate reuse.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class PasswordHistory(SQLModel, table=True):
    """
    PasswordHistory entity - one password hash a user has set.

    Business Rules:
    - Created on every successful password change (reset or direct change)
    - Never updated
    - Only the newest 5 entries per user are retained
    """

    __tablename__ = "password_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    password_hash: str = Field(max_length=60)

    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_password_history_user_created", "user_id", "created_at"),
    )
