"""Unit tests for the email notifier."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from cleanconnect.config import Settings
from cleanconnect.services.notifier import EmailNotifier, NotificationError


@pytest.mark.unit
class TestEmailNotifier:
    """Unit tests for SMTP delivery and mock mode."""

    @pytest.mark.parametrize("host", [None, "", "smtp.example.com"])
    def test_mock_mode_without_real_host(self, host) -> None:
        assert EmailNotifier(Settings(smtp_host=host)).is_mock

    @pytest.mark.asyncio
    async def test_mock_mode_never_opens_a_connection(self) -> None:
        """Test that mock mode only logs the message."""
        with patch("cleanconnect.services.notifier.smtplib.SMTP") as smtp_class:
            await EmailNotifier(Settings(smtp_host=None)).send("a@b.ng", "Hi", "Body")

        smtp_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_through_smtp(self) -> None:
        """Test that a configured notifier logs in and sends one message."""
        settings = Settings(smtp_host="mail.test", smtp_port=2525, smtp_user="bot", smtp_password="pw")

        with patch("cleanconnect.services.notifier.smtplib.SMTP") as smtp_class:
            smtp = smtp_class.return_value.__enter__.return_value
            await EmailNotifier(settings).send("client@b.ng", "Booking Confirmation", "Booked", html="<p>Booked</p>")

        smtp_class.assert_called_once_with("mail.test", 2525, timeout=10)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("bot", "pw")
        message = smtp.send_message.call_args.args[0]
        assert message["To"] == "client@b.ng"
        assert message["Subject"] == "Booking Confirmation"
        assert message["From"] == '"CleanConnect" <no-reply@cleanconnect.ng>'

    @pytest.mark.asyncio
    async def test_smtp_failure_raises_notification_error(self) -> None:
        settings = Settings(smtp_host="mail.test", smtp_use_tls=False)
        failing = MagicMock(side_effect=smtplib.SMTPConnectError(421, "busy"))

        with patch("cleanconnect.services.notifier.smtplib.SMTP", failing):
            with pytest.raises(NotificationError):
                await EmailNotifier(settings).send("a@b.ng", "Hi", "Body")
