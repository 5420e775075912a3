"""Outgoing email notifications."""

import asyncio
import smtplib
from email.message import EmailMessage

import structlog

from cleanconnect.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    """Raised when an email could not be delivered."""


class EmailNotifier:
    """Sends transactional email over SMTP.

    When no SMTP host is configured the notifier runs in mock mode and only
    logs the message, so local development never needs a mail server.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @property
    def is_mock(self) -> bool:
        host = self.settings.smtp_host
        return not host or host == "smtp.example.com"

    async def send(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        """Send an email.

        Args:
            to: Recipient address
            subject: Subject line
            text: Plain-text body
            html: Optional HTML alternative

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        if self.is_mock:
            logger.info("mock_email_sent", to=to, subject=subject, body=text)
            return

        message = EmailMessage()
        message["From"] = f'"{self.settings.from_name}" <{self.settings.from_email}>'
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_send_failed", to=to, subject=subject, error=str(exc))
            raise NotificationError("Email could not be sent") from exc

        logger.info("email_sent", to=to, subject=subject)

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10) as smtp:
            if self.settings.smtp_use_tls:
                smtp.starttls()
            if self.settings.smtp_user:
                smtp.login(self.settings.smtp_user, self.settings.smtp_password or "")
            smtp.send_message(message)
