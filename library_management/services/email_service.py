"""Outbound email over SMTP."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText

from library_management.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class Message:
    """A plain text email."""

    mail_to: str
    subject: str
    body: str


class EmailService:
    """Sends email through the configured SMTP server.

    Sending is fire-and-forget: transport errors are logged, never raised.
    Without SMTP credentials messages are only logged.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        if not self.settings.email_enabled:
            logger.info("SMTP not configured, email delivery disabled")

    def send(self, message: Message) -> bool:
        """Send a message. Returns whether it was handed to the SMTP server."""
        if not self.settings.email_enabled:
            logger.info(f"Email to {message.mail_to} not sent (SMTP disabled): {message.subject}")
            return False

        mime = MIMEText(message.body)
        mime["Subject"] = message.subject
        mime["From"] = self.settings.mail_from
        mime["To"] = message.mail_to

        try:
            with smtplib.SMTP(self.settings.smtp_server, self.settings.smtp_port) as server:
                server.starttls()
                server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.sendmail(self.settings.mail_from, [message.mail_to], mime.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message.mail_to}: {e}")
            return False

        logger.info(f"Sent email to {message.mail_to}: {message.subject}")
        return True
