"""
SMTP email service.

smtplib is blocking, so each send runs in a worker thread. Failures are
logged and returned as EmailResult(success=False); nothing is raised.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import make_msgid
from typing import Optional

from shared.config import Settings, get_settings

from .interfaces import IEmailService
from .models import EmailMessage, EmailResult
from .templates import PASSWORD_RESET_SUBJECT, password_reset_html, password_reset_text

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 10


class SmtpEmailService(IEmailService):
    """Sends mail through the configured SMTP relay."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def _build(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["Subject"] = message.subject
        mime["From"] = self._settings.smtp_from
        mime["To"] = message.to
        mime["Message-ID"] = make_msgid(domain=self._settings.smtp_from.rpartition("@")[2] or None)
        mime.set_content(message.text)
        if message.html:
            mime.add_alternative(message.html, subtype="html")
        return mime

    def _send_sync(self, mime: MimeMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_user and settings.smtp_password:
                server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(mime)

    async def send_email(self, message: EmailMessage) -> EmailResult:
        mime = self._build(message)
        try:
            await asyncio.to_thread(self._send_sync, mime)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", message.to, e)
            return EmailResult(success=False, error=str(e))

        message_id = mime["Message-ID"]
        logger.info("Email sent to %s (%s)", message.to, message_id)
        return EmailResult(success=True, message_id=message_id)

    async def send_password_reset_email(self, email: str, reset_url: str) -> EmailResult:
        return await self.send_email(
            EmailMessage(
                to=email,
                subject=PASSWORD_RESET_SUBJECT,
                text=password_reset_text(reset_url),
                html=password_reset_html(reset_url),
            )
        )

