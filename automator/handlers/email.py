"""SMTP email handler."""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from automator.core.config import Settings, get_settings
from automator.core.logging import get_logger
from automator.handlers.base import EmailSender

logger = get_logger(__name__)


class SmtpEmailSender(EmailSender):
    """Email handler using SMTP."""

    def __init__(self, settings: Settings | None = None):
        """Initialize with settings."""
        self._settings = settings or get_settings()

    @property
    def configured(self) -> bool:
        return bool(self._settings.smtp_host)

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain text and HTML email.

        Raises:
            RuntimeError: If SMTP is not configured
            aiosmtplib.SMTPException: On transport failure
        """
        if not self.configured:
            raise RuntimeError("SMTP not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._settings.smtp_from or self._settings.smtp_user
        msg["To"] = to
        msg.attach(MIMEText(body, "plain", "utf-8"))
        msg.attach(MIMEText(self._to_html(body), "html", "utf-8"))

        await aiosmtplib.send(
            msg,
            hostname=self._settings.smtp_host,
            port=self._settings.smtp_port,
            username=self._settings.smtp_user or None,
            password=self._settings.smtp_password or None,
            use_tls=not self._settings.smtp_use_tls,
            start_tls=self._settings.smtp_use_tls,
            timeout=self._settings.smtp_timeout_seconds,
        )
        logger.debug("Email sent", recipient=to)

    @staticmethod
    def _to_html(body: str) -> str:
        escaped = body.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        return f"<html><body>{escaped.replace(chr(10), '<br>')}</body></html>"
