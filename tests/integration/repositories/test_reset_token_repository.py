from datetime import timedelta

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from src.domain.entities import PasswordResetToken
from src.domain.tokens import hash_token
from tests.fixtures.builders import create_reset_token, create_user


async def stored_token(repo: PasswordResetTokenRepository, plain_token: str) -> PasswordResetToken:
    token = await repo.get_by_token_hash(hash_token(plain_token))
    assert token is not None
    return token


@pytest.mark.asyncio
async def test_consume_succeeds_only_once(db_session: AsyncSession, hasher, clock):
    user = await create_user(db_session, hasher)
    plain_token = await create_reset_token(db_session, user, clock)
    repo = PasswordResetTokenRepository(db_session)
    token_id = (await stored_token(repo, plain_token)).id

    first = await repo.consume(token_id, clock.now())
    second = await repo.consume(token_id, clock.now())
    await db_session.commit()

    assert first is True
    assert second is False


@pytest.mark.asyncio
async def test_expired_token_cannot_be_consumed(db_session: AsyncSession, hasher, clock):
    user = await create_user(db_session, hasher)
    plain_token = await create_reset_token(db_session, user, clock, expires_in=timedelta(minutes=10))
    repo = PasswordResetTokenRepository(db_session)
    token_id = (await stored_token(repo, plain_token)).id

    assert await repo.consume(token_id, clock.now() + timedelta(minutes=10)) is False


@pytest.mark.asyncio
async def test_delete_by_user_id_leaves_other_users_alone(
    db_session: AsyncSession, hasher, clock
):
    guest = await create_user(db_session, hasher, email="guest@hotel.com")
    other = await create_user(db_session, hasher, email="other@hotel.com")
    await create_reset_token(db_session, guest, clock)
    await create_reset_token(db_session, guest, clock)
    other_token = await create_reset_token(db_session, other, clock)
    repo = PasswordResetTokenRepository(db_session)

    deleted = await repo.delete_by_user_id(guest.id)
    await db_session.commit()

    assert deleted == 2
    assert await repo.get_by_token_hash(hash_token(other_token)) is not None


@pytest.mark.asyncio
async def test_delete_expired_removes_used_tokens_too(
    db_session: AsyncSession, hasher, clock
):
    user = await create_user(db_session, hasher)
    live = await create_reset_token(db_session, user, clock)
    used = await create_reset_token(db_session, user, clock, used=True)
    await create_reset_token(db_session, user, clock, expires_in=timedelta(seconds=-1))
    repo = PasswordResetTokenRepository(db_session)

    assert await repo.delete_expired(clock.now()) == 2
    await db_session.commit()

    assert await repo.get_by_token_hash(hash_token(live)) is not None
    assert await repo.get_by_token_hash(hash_token(used)) is None


@pytest.mark.asyncio
async def test_counts_for_statistics(db_session: AsyncSession, hasher, clock):
    user = await create_user(db_session, hasher)
    await create_reset_token(db_session, user, clock)
    await create_reset_token(db_session, user, clock, used=True)
    await create_reset_token(db_session, user, clock, expires_in=timedelta(minutes=-5))
    repo = PasswordResetTokenRepository(db_session)
    since = clock.now() - timedelta(days=1)

    assert await repo.count_created_since(since) == 3
    assert await repo.count_used_since(since) == 1
    assert await repo.count_expired_unused(since, clock.now()) == 1
    assert await repo.count_active(clock.now()) == 1
