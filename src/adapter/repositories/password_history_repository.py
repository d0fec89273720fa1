from typing import List
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_history_repository import IPasswordHistoryRepository
from src.domain.entities import PasswordHistory


class PasswordHistoryRepository(IPasswordHistoryRepository):
    """PasswordHistory repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: PasswordHistory) -> PasswordHistory:
        """Append a password hash to the user's history"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_recent_by_user_id(self, user_id: UUID, limit: int) -> List[PasswordHistory]:
        """Get the newest entries for a user, newest first"""
        stmt = (
            select(PasswordHistory)
            .where(PasswordHistory.user_id == user_id)
            .order_by(PasswordHistory.created_at.desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def trim_to_recent(self, user_id: UUID, keep: int) -> int:
        """Delete everything but the newest `keep` entries of a user"""
        stmt = (
            select(PasswordHistory.id)
            .where(PasswordHistory.user_id == user_id)
            .order_by(PasswordHistory.created_at.desc())
            .offset(keep)
        )
        result = await self.session.exec(stmt)
        stale_ids = list(result.all())
        if not stale_ids:
            return 0

        delete_stmt = (
            delete(PasswordHistory)
            .where(PasswordHistory.id.in_(stale_ids))
            .execution_options(synchronize_session=False)
        )
        deleted = await self.session.execute(delete_stmt)
        await self.session.flush()
        return deleted.rowcount
