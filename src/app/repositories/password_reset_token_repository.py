from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete every token of a user. Returns count of deleted tokens."""
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID, used_at: datetime) -> None:
        """Set used_at unconditionally"""
        pass

    @abstractmethod
    async def consume(self, token_id: UUID, now: datetime) -> bool:
        """
        Set used_at only if the token is still unused and unexpired.

        Returns True if this call consumed the token.
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens with expires_at < now or a used_at set. Returns count of deleted tokens."""
        pass

    @abstractmethod
    async def count_created_since(self, since: datetime) -> int:
        """Count tokens issued since the given time"""
        pass

    @abstractmethod
    async def count_used_since(self, since: datetime) -> int:
        """Count tokens consumed since the given time"""
        pass

    @abstractmethod
    async def count_expired_unused(self, since: datetime, now: datetime) -> int:
        """Count tokens issued since the given time that expired unused"""
        pass

    @abstractmethod
    async def count_active(self, now: datetime) -> int:
        """Count tokens that are currently valid"""
        pass
