"""
Unit tests for mail rendering and best-effort delivery
"""
from unittest.mock import AsyncMock

import pytest

from src.adapter.services.mail_service import ConsoleMailService, TemplateRenderer
from src.app.services.mail_service import MailResult, send_notification
from tests.fixtures.fakes import RecordingMailService


def test_reset_template_contains_link_and_expiry():
    body = TemplateRenderer().render(
        "password_reset.html",
        {
            "full_name": "Jane Guest",
            "reset_link": "https://hotel.example.com/reset?token=abc",
            "expires_in_minutes": 60,
        },
    )

    assert "Jane Guest" in body
    assert "https://hotel.example.com/reset?token=abc" in body
    assert "60 minutes" in body


def test_templates_escape_user_input():
    body = TemplateRenderer().render(
        "password_changed.html",
        {"full_name": "<script>x</script>", "changed_at": "now", "other_sessions_signed_out": True},
    )

    assert "<script>" not in body
    assert "All other devices have been signed out." in body


def test_password_set_template_mentions_both_sign_in_methods():
    body = TemplateRenderer().render(
        "password_set.html", {"full_name": "Sam Social", "set_at": "2025-01-15 12:00 UTC"}
    )

    assert "Sam Social" in body
    assert "2025-01-15 12:00 UTC" in body
    assert "as well as with Google" in body


@pytest.mark.asyncio
async def test_console_backend_reports_missing_template():
    result = await ConsoleMailService().send("guest@hotel.com", "Hi", "missing.html", {})

    assert result.success is False
    assert "missing.html" in result.error


@pytest.mark.asyncio
async def test_send_notification_reports_success():
    mail = RecordingMailService()

    assert await send_notification(mail, "guest@hotel.com", "Hi", "password_reset.html", {})
    assert mail.sent[0]["to"] == "guest@hotel.com"


@pytest.mark.asyncio
async def test_send_notification_absorbs_failed_result():
    mail = RecordingMailService(fail_with="mailbox full")

    assert await send_notification(mail, "guest@hotel.com", "Hi", "t.html", {}) is False


@pytest.mark.asyncio
async def test_send_notification_absorbs_exceptions():
    mail = AsyncMock()
    mail.send.side_effect = TimeoutError("smtp timeout")

    assert await send_notification(mail, "guest@hotel.com", "Hi", "t.html", {}) is False


def test_mail_result_defaults():
    assert MailResult(success=True).error is None
