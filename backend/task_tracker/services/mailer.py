# backend/task_tracker/services/mailer.py
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from ..config import Settings, settings as app_settings
from ..utils.logging import service_logger


class TransportError(Exception):
    """Raised when the mail server does not accept a message"""


class SMTPTransport:
    """Async SMTP transport configured once from settings"""

    def __init__(self, config: Optional[Settings] = None):
        config = config or app_settings
        self.hostname = config.SMTP_HOST
        self.port = config.SMTP_PORT
        self.username = config.SMTP_USER
        self.password = config.SMTP_PASSWORD
        self.use_tls = config.SMTP_USE_TLS
        self.start_tls = config.SMTP_START_TLS and not config.SMTP_USE_TLS
        self.from_email = config.SMTP_FROM or config.SMTP_USER
        self.timeout = config.SMTP_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.hostname and self.from_email)

    def build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self.from_email
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=self.hostname)
        message.attach(MIMEText(html, "html"))
        return message

    async def send(self, to: str, subject: str, html: str) -> str:
        """Send an HTML email and return its Message-ID"""
        if not self.is_configured:
            service_logger.warning("Mail transport not configured", extra={"recipient": to})
            raise TransportError("Mail transport is not configured")

        message = self.build_message(to, subject, html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                start_tls=self.start_tls,
                timeout=self.timeout
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            service_logger.error("Failed to send email", extra={
                "recipient": to,
                "subject": subject,
                "error": str(e)
            })
            raise TransportError(str(e)) from e

        service_logger.info("Email sent", extra={
            "recipient": to,
            "message_id": message["Message-ID"]
        })
        return message["Message-ID"]


def get_mail_transport() -> SMTPTransport:
    return SMTPTransport(app_settings)
