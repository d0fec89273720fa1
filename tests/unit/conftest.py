import pytest
from unittest.mock import AsyncMock, MagicMock

from tests.fixtures.fakes import FakePasswordHasher, FixedClock, RecordingMailService


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.revoke_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.revoke_all_except_session = AsyncMock(return_value=0)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.delete_by_user_id = AsyncMock(return_value=0)
    uow.password_reset_tokens.consume = AsyncMock(return_value=True)
    uow.password_reset_tokens.mark_used = AsyncMock()
    uow.password_reset_tokens.delete_expired = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_created_since = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_used_since = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_expired_unused = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_active = AsyncMock(return_value=0)

    uow.password_history = MagicMock()
    uow.password_history.create = AsyncMock(side_effect=lambda entry: entry)
    uow.password_history.get_recent_by_user_id = AsyncMock(return_value=[])
    uow.password_history.trim_to_recent = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=lambda event: event)
    return uow


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def hasher():
    return FakePasswordHasher()


@pytest.fixture
def mail_service():
    return RecordingMailService()
