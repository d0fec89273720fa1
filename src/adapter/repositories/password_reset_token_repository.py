from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete every token of a user"""
        stmt = (
            delete(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def mark_used(self, token_id: UUID, used_at: datetime) -> None:
        """Set used_at unconditionally"""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token_id)
            .values(used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def consume(self, token_id: UUID, now: datetime) -> bool:
        """Mark the token used only if it is still unused and unexpired"""
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.id == token_id,
                PasswordResetToken.used_at.is_(None),
                PasswordResetToken.expires_at > now,
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens that expired or were already used"""
        stmt = (
            delete(PasswordResetToken)
            .where(
                or_(
                    PasswordResetToken.expires_at < now,
                    PasswordResetToken.used_at.is_not(None),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def _count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(PasswordResetToken).where(*criteria)
        result = await self.session.exec(stmt)
        return result.one()

    async def count_created_since(self, since: datetime) -> int:
        return await self._count(PasswordResetToken.created_at >= since)

    async def count_used_since(self, since: datetime) -> int:
        return await self._count(
            PasswordResetToken.used_at.is_not(None),
            PasswordResetToken.used_at >= since,
        )

    async def count_expired_unused(self, since: datetime, now: datetime) -> int:
        return await self._count(
            PasswordResetToken.created_at >= since,
            PasswordResetToken.used_at.is_(None),
            PasswordResetToken.expires_at <= now,
        )

    async def count_active(self, now: datetime) -> int:
        return await self._count(
            PasswordResetToken.used_at.is_(None),
            PasswordResetToken.expires_at > now,
        )
