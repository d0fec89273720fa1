from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import PasswordHistory


class IPasswordHistoryRepository(ABC):
    """PasswordHistory repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: PasswordHistory) -> PasswordHistory:
        """Create a new password history entry"""
        pass

    @abstractmethod
    async def get_recent_by_user_id(self, user_id: UUID, limit: int) -> List[PasswordHistory]:
        """Get the newest entries for a user, newest first"""
        pass

    @abstractmethod
    async def trim_to_recent(self, user_id: UUID, keep: int) -> int:
        """Delete all but the newest `keep` entries for a user. Returns count deleted."""
        pass
