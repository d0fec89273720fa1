"""
Unit tests for RequestPasswordResetUseCase

Tests all business logic with mocked dependencies.
"""
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.adapter.services.attempt_store import InMemoryAttemptStore
from src.app.services.rate_limiter import PasswordResetRateLimiter
from src.app.use_cases.auth.request_password_reset_use_case import RequestPasswordResetUseCase
from src.domain.entities import AccountType, AlternativeAuthMethod, User
from src.domain.tokens import hash_token
from tests.fixtures.fakes import RecordingMailService

RESET_URL = "https://hotel.example.com/auth/reset-password"


@pytest.fixture
def rate_limiter(clock):
    return PasswordResetRateLimiter(InMemoryAttemptStore(), clock)


@pytest.fixture
def use_case(mock_uow, rate_limiter, mail_service, clock):
    return RequestPasswordResetUseCase(
        mock_uow, rate_limiter, mail_service, clock, reset_url=RESET_URL
    )


def make_user(**overrides):
    fields = dict(
        id=uuid4(),
        email="guest@hotel.com",
        full_name="Jane Guest",
        password_hash="hashed:Old#Pass1",
    )
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
async def test_successful_password_reset_request(use_case, mock_uow, mail_service, clock):
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email.return_value = user

    # Act
    result = await use_case.execute("guest@hotel.com")

    # Assert
    assert result.is_ok()
    assert result.value.status == "sent"
    assert result.value.email_sent is True
    assert result.value.can_reset_password is True

    mock_uow.password_reset_tokens.delete_by_user_id.assert_awaited_once_with(user.id)
    record = mock_uow.password_reset_tokens.create.call_args.args[0]
    assert record.user_id == user.id
    assert len(record.token_hash) == 64

    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.action == "password_reset_requested"
    mock_uow.commit.assert_awaited_once()

    # Mailed link carries the plain token whose hash was stored
    mail = mail_service.last("password_reset.html")
    assert mail["to"] == "guest@hotel.com"
    link = mail["context"]["reset_link"]
    assert link.startswith(f"{RESET_URL}?token=")
    assert hash_token(link.split("token=")[1]) == record.token_hash
    assert mail["context"]["expires_in_minutes"] == 60


@pytest.mark.asyncio
async def test_email_is_normalized_before_lookup(use_case, mock_uow):
    await use_case.execute("  Guest@Hotel.COM ")

    mock_uow.users.get_by_email.assert_awaited_once_with("guest@hotel.com")


@pytest.mark.asyncio
async def test_unknown_email_gets_identical_response(use_case, mock_uow, mail_service, clock):
    """No enumeration: unknown and existing emails look the same"""
    mock_uow.users.get_by_email.return_value = make_user()
    existing = await use_case.execute("guest@hotel.com")

    clock.advance(minutes=6)
    mock_uow.users.get_by_email.return_value = None
    mock_uow.password_reset_tokens.create.reset_mock()
    sent_before = len(mail_service.sent)

    unknown = await use_case.execute("nobody@hotel.com")

    assert unknown.is_ok()
    assert unknown.value.model_dump() == existing.value.model_dump()
    mock_uow.password_reset_tokens.create.assert_not_called()
    assert len(mail_service.sent) == sent_before


@pytest.mark.asyncio
async def test_inactive_user_gets_generic_response(use_case, mock_uow, mail_service):
    mock_uow.users.get_by_email.return_value = make_user(is_active=False)

    result = await use_case.execute("guest@hotel.com")

    assert result.is_ok()
    assert result.value.can_reset_password is True
    mock_uow.password_reset_tokens.create.assert_not_called()
    assert mail_service.sent == []


@pytest.mark.asyncio
async def test_google_only_account_is_pointed_to_google(use_case, mock_uow, mail_service):
    mock_uow.users.get_by_email.return_value = make_user(
        password_hash=None, google_id="google-123"
    )

    result = await use_case.execute("guest@hotel.com")

    assert result.is_ok()
    data = result.value
    assert data.email_sent is False
    assert data.can_reset_password is False
    assert data.account_type == AccountType.GOOGLE_ONLY
    assert data.alternative_auth.method == AlternativeAuthMethod.GOOGLE_OAUTH
    mock_uow.password_reset_tokens.create.assert_not_called()
    assert mail_service.sent == []


@pytest.mark.asyncio
async def test_rate_limited_request_is_rejected(use_case, mock_uow, clock):
    await use_case.execute("guest@hotel.com")
    clock.advance(minutes=2)

    result = await use_case.execute("guest@hotel.com")

    assert result.is_err()
    assert result.error.code == "RATE_LIMIT_EXCEEDED"
    assert result.error.details == {"wait_minutes": 3, "attempts_today": 1}
    assert mock_uow.users.get_by_email.await_count == 1


@pytest.mark.asyncio
async def test_daily_limit_reports_attempts(use_case, clock):
    for _ in range(3):
        assert (await use_case.execute("guest@hotel.com")).is_ok()
        clock.advance(minutes=6)

    result = await use_case.execute("guest@hotel.com")

    assert result.error.code == "RATE_LIMIT_EXCEEDED"
    assert result.error.details == {"attempts_today": 3}


@pytest.mark.asyncio
async def test_rate_limit_store_failure_allows_request(mock_uow, mail_service, clock):
    rate_limiter = AsyncMock()
    rate_limiter.check.side_effect = ConnectionError("redis down")
    use_case = RequestPasswordResetUseCase(
        mock_uow, rate_limiter, mail_service, clock, reset_url=RESET_URL
    )
    mock_uow.users.get_by_email.return_value = make_user()

    result = await use_case.execute("guest@hotel.com")

    assert result.is_ok()
    mock_uow.password_reset_tokens.create.assert_awaited_once()


@pytest.mark.asyncio
async def test_mail_failure_does_not_fail_request(mock_uow, rate_limiter, clock):
    mail_service = RecordingMailService(raise_error=True)
    use_case = RequestPasswordResetUseCase(
        mock_uow, rate_limiter, mail_service, clock, reset_url=RESET_URL
    )
    mock_uow.users.get_by_email.return_value = make_user()

    result = await use_case.execute("guest@hotel.com")

    assert result.is_ok()
    assert result.value.status == "sent"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_storage_failure_still_counts_attempt(use_case, mock_uow, rate_limiter):
    mock_uow.users.get_by_email.side_effect = RuntimeError("db down")

    result = await use_case.execute("guest@hotel.com")

    assert result.is_err()
    assert result.error.code == "PASSWORD_RESET_FAILED"
    decision = await rate_limiter.check("guest@hotel.com")
    assert decision.attempts_today == 1


@pytest.mark.asyncio
async def test_unknown_email_counts_as_attempt(use_case, rate_limiter):
    await use_case.execute("nobody@hotel.com")

    decision = await rate_limiter.check("nobody@hotel.com")
    assert decision.allowed is False
    assert decision.attempts_today == 1
