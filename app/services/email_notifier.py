"""
Outbound email notifications over SMTP (aiosmtplib).

Sending is best effort: callers schedule ``send`` as a background task and
never see an exception. When no SMTP host is configured the message is
logged and skipped.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

import aiosmtplib

from app import settings

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Async email sender using SMTP"""

    def __init__(
        self,
        host: str = settings.SMTP_HOST,
        port: int = settings.SMTP_PORT,
        username: str = settings.SMTP_USER,
        password: str = settings.SMTP_PASSWORD,
        use_tls: bool = settings.SMTP_USE_TLS,
        sender: str = settings.EMAIL_FROM,
        admin_email: str = settings.ADMIN_EMAIL,
        timeout: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.admin_email = admin_email
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.host)

    async def send(
        self,
        to: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
        sender: Optional[str] = None,
    ) -> bool:
        """Send one message. Returns True on success, False otherwise."""
        if not self.is_configured:
            logger.warning("[Email] SMTP not configured, skipping '%s' to %s", subject, to)
            return False

        message = MIMEMultipart("alternative")
        message["From"] = sender or self.sender
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(text, "plain"))
        if html:
            message.attach(MIMEText(html, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("[Email] Failed to send '%s' to %s: %s", subject, to, exc)
            return False

        logger.info("[Email] Sent '%s' to %s", subject, to)
        return True

    async def notify_contact_message(self, contact: dict) -> bool:
        """Tell the site administrator a contact message arrived."""
        if not self.admin_email:
            logger.info("[Email] ADMIN_EMAIL unset, contact message %s not forwarded", contact.get("id"))
            return False
        subject = f"New contact message: {contact.get('subject') or 'No subject'}"
        text = (
            f"From: {contact['name']} <{contact['email']}>\n\n"
            f"{contact['message']}\n"
        )
        html = (
            f"<p><strong>From:</strong> {escape(contact['name'])} "
            f"&lt;{escape(contact['email'])}&gt;</p>"
            f"<p>{escape(contact['message'])}</p>"
        )
        return await self.send(self.admin_email, subject, text, html)
