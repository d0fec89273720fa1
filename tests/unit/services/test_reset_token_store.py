"""
Unit tests for ResetTokenStore
"""
from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.reset_token_store import ResetTokenStore
from src.domain.entities import PasswordResetToken, StatisticsTimeframe
from src.domain.tokens import hash_token


@pytest.fixture
def store(mock_uow, clock):
    return ResetTokenStore(mock_uow, clock)


@pytest.mark.asyncio
async def test_issue_replaces_previous_tokens(store, mock_uow, clock):
    user_id = uuid4()

    token, record = await store.issue(user_id, "guest@hotel.com")

    mock_uow.password_reset_tokens.delete_by_user_id.assert_awaited_once_with(user_id)
    assert record.user_id == user_id
    assert record.email == "guest@hotel.com"
    assert record.token_hash == hash_token(token)
    assert record.token_hash != token
    assert record.created_at == clock.now()
    assert record.expires_at == clock.now() + timedelta(hours=1)
    assert record.used_at is None


@pytest.mark.asyncio
async def test_issue_uses_configured_expiry(mock_uow, clock):
    store = ResetTokenStore(mock_uow, clock, expiry=timedelta(minutes=30))

    _, record = await store.issue(uuid4(), "guest@hotel.com")

    assert record.expires_at == clock.now() + timedelta(minutes=30)


def stored_token(clock, token, **overrides):
    fields = dict(
        user_id=uuid4(),
        token_hash=hash_token(token),
        email="guest@hotel.com",
        created_at=clock.now(),
        expires_at=clock.now() + timedelta(hours=1),
    )
    fields.update(overrides)
    return PasswordResetToken(**fields)


@pytest.mark.asyncio
async def test_find_valid_looks_up_by_hash(store, mock_uow, clock):
    record = stored_token(clock, "plain-token")
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = record

    assert await store.find_valid("plain-token") is record
    mock_uow.password_reset_tokens.get_by_token_hash.assert_awaited_once_with(
        hash_token("plain-token")
    )


@pytest.mark.asyncio
async def test_find_valid_rejects_token_at_expiry(store, mock_uow, clock):
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = stored_token(
        clock, "plain-token"
    )
    clock.advance(hours=1)

    assert await store.find_valid("plain-token") is None


@pytest.mark.asyncio
async def test_find_valid_accepts_token_one_second_before_expiry(store, mock_uow, clock):
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = stored_token(
        clock, "plain-token"
    )
    clock.advance(minutes=59, seconds=59)

    assert await store.find_valid("plain-token") is not None


@pytest.mark.asyncio
async def test_find_valid_rejects_used_and_unknown_tokens(store, mock_uow, clock):
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = stored_token(
        clock, "plain-token", used_at=clock.now()
    )
    assert await store.find_valid("plain-token") is None

    mock_uow.password_reset_tokens.get_by_token_hash.return_value = None
    assert await store.find_valid("unknown") is None


@pytest.mark.asyncio
async def test_consume_passes_current_time(store, mock_uow, clock):
    token_id = uuid4()
    mock_uow.password_reset_tokens.consume.return_value = False

    assert await store.consume(token_id) is False
    mock_uow.password_reset_tokens.consume.assert_awaited_once_with(token_id, clock.now())


@pytest.mark.asyncio
async def test_purge_expired_returns_count(store, mock_uow, clock):
    mock_uow.password_reset_tokens.delete_expired.return_value = 4

    assert await store.purge_expired() == 4
    mock_uow.password_reset_tokens.delete_expired.assert_awaited_once_with(clock.now())


@pytest.mark.asyncio
async def test_statistics_window(store, mock_uow, clock):
    tokens = mock_uow.password_reset_tokens
    tokens.count_created_since.return_value = 10
    tokens.count_used_since.return_value = 6
    tokens.count_expired_unused.return_value = 3
    tokens.count_active.return_value = 1

    stats = await store.statistics(StatisticsTimeframe.week)

    since = clock.now() - timedelta(days=7)
    assert stats.since == since
    assert (stats.total_requests, stats.successful_resets) == (10, 6)
    assert (stats.expired_tokens, stats.active_tokens) == (3, 1)
    tokens.count_created_since.assert_awaited_once_with(since)
    tokens.count_expired_unused.assert_awaited_once_with(since, clock.now())
