"""
Transactional email service.
Delivers over SMTP with aiosmtplib when EMAIL_DELIVERY_ENABLED is set;
otherwise messages are rendered and logged only.
"""
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

import aiosmtplib

from app.services.email_templates import render_invite_email, render_welcome_email

logger = logging.getLogger(__name__)


class EmailService:
    """Async email service using SMTP"""

    def __init__(
        self,
        delivery_enabled: bool,
        smtp_host: str,
        smtp_port: int,
        smtp_user: str,
        smtp_password: str,
        from_email: str,
        from_name: str,
        frontend_url: str,
    ):
        self.delivery_enabled = delivery_enabled
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.frontend_url = frontend_url

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    async def send(self, to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
        """
        Send an email asynchronously.

        Returns True if the message was delivered (or logged with delivery
        disabled), False otherwise.
        """
        if not self.delivery_enabled:
            logger.info(
                f"[Email] Delivery disabled, prepared email for {to_email}: "
                f"subject={subject!r}, {len(html_content)} characters"
            )
            return True

        if not self.is_configured:
            logger.warning("[Email] SMTP credentials not configured, skipping email send")
            return False

        try:
            message = MIMEMultipart("alternative")
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email
            message["Subject"] = subject

            if text_content:
                message.attach(MIMEText(text_content, "plain"))
            message.attach(MIMEText(html_content, "html"))

            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True,
            )
            logger.info(f"[Email] Sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email] Failed to send email to {to_email}: {e}", exc_info=True)
            return False

    async def send_welcome_email(
        self,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language: str = "es",
    ) -> bool:
        full_name = " ".join(part for part in (first_name, last_name) if part) or (
            "Usuario" if language == "es" else "User"
        )
        subject, html = render_welcome_email(full_name, language, self.frontend_url)
        logger.info(f"[Email] Sending welcome email to {email} ({language})")
        return await self.send(email, subject, html)

    async def send_invite_email(
        self,
        email: str,
        full_name: str,
        organization: str,
        roles: List[str],
        accept_url: str,
        language: str = "es",
    ) -> bool:
        subject, html = render_invite_email(full_name, organization, roles, accept_url, language)
        logger.info(f"[Email] Sending invite email to {email} for {organization}")
        return await self.send(email, subject, html)


def create_email_service(settings) -> EmailService:
    return EmailService(
        delivery_enabled=settings.EMAIL_DELIVERY_ENABLED,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
        from_email=settings.EMAIL_FROM,
        from_name=settings.EMAIL_FROM_NAME,
        frontend_url=settings.FRONTEND_URL,
    )
