"""
Unit tests for LoginUseCase
"""
from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.api.utils.jwt import verify_jwt
from src.app.use_cases.auth.login_use_case import LoginUseCase
from src.domain.entities import User


@pytest.fixture
def user(mock_uow):
    user = User(id=uuid4(), email="guest@hotel.com", password_hash="hashed:Right#Pass1")
    mock_uow.users.get_by_email.return_value = user
    return user


@pytest.mark.asyncio
async def test_successful_login_creates_session(mock_uow, hasher, clock, user):
    result = await LoginUseCase(mock_uow, hasher, clock).execute("guest@hotel.com", "Right#Pass1")

    assert result.is_ok()
    session = mock_uow.sessions.create.call_args.args[0]
    assert session.user_id == user.id
    assert session.expires_at == clock.now() + timedelta(days=30)
    assert result.value.session_id == str(session.id)
    assert user.last_login_at == clock.now()

    claims = verify_jwt(result.value.access_token)
    assert claims["user_id"] == str(user.id)
    assert claims["session_id"] == str(session.id)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_wrong_password(mock_uow, hasher, clock, user):
    result = await LoginUseCase(mock_uow, hasher, clock).execute("guest@hotel.com", "Wrong#Pass1")

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_email_still_hashes(mock_uow, clock):
    hasher = MagicMock()

    result = await LoginUseCase(mock_uow, hasher, clock).execute("nobody@hotel.com", "Any#Pass1")

    assert result.error.code == "INVALID_CREDENTIALS"
    hasher.hash.assert_called_once_with("Any#Pass1")


@pytest.mark.asyncio
async def test_google_only_account_cannot_use_password(mock_uow, hasher, clock, user):
    user.password_hash = None
    user.google_id = "google-123"

    result = await LoginUseCase(mock_uow, hasher, clock).execute("guest@hotel.com", "Any#Pass1")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_disabled_user(mock_uow, hasher, clock, user):
    user.is_active = False

    result = await LoginUseCase(mock_uow, hasher, clock).execute("guest@hotel.com", "Right#Pass1")

    assert result.error.code == "USER_DISABLED"


@pytest.mark.asyncio
async def test_long_password_for_unknown_email_is_rejected_cleanly(mock_uow, clock):
    hasher = BcryptPasswordHasher(rounds=4)

    result = await LoginUseCase(mock_uow, hasher, clock).execute("nobody@hotel.com", "Aa1!" * 20)

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_long_password_logs_in_with_bcrypt(mock_uow, clock, user):
    hasher = BcryptPasswordHasher(rounds=4)
    user.password_hash = hasher.hash("Aa1!" * 20)

    result = await LoginUseCase(mock_uow, hasher, clock).execute("guest@hotel.com", "Aa1!" * 20)

    assert result.is_ok()
