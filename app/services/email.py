"""Email service for sending transactional emails via SendGrid."""

import html
import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings

logger = logging.getLogger("academy")


class EmailService:
    """Handles sending emails via SendGrid."""

    def __init__(self, api_key: str | None, from_email: str, frontend_url: str, reset_expire_minutes: int = 60) -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.frontend_url = frontend_url.rstrip("/")
        self.reset_expire_minutes = reset_expire_minutes
        self.app_name = "Academy"

    def build_reset_url(self, token: str) -> str:
        return f"{self.frontend_url}/reset-password?token={token}"

    def send_password_reset(self, to_email: str, name: str, reset_url: str) -> bool:
        """Send password reset email.

        Returns True on success, False on failure. Never raises.
        """
        if not self.api_key:
            logger.warning("SENDGRID_API_KEY not set, reset email not sent")
            logger.info("PASSWORD RESET: %s", reset_url)
            return False

        return self._send(
            to_email,
            f"{self.app_name} - Reset Your Password",
            self._build_reset_email_html(name=name, reset_url=reset_url),
        )

    def send_welcome(self, to_email: str, name: str) -> bool:
        """Send the welcome email after sign-up. Never raises."""
        if not self.api_key:
            logger.warning("SENDGRID_API_KEY not set, welcome email not sent")
            return False

        return self._send(
            to_email,
            f"Welcome to {self.app_name}",
            self._build_welcome_email_html(name=name),
        )

    def _send(self, to_email: str, subject: str, html_content: str) -> bool:
        message = Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )

        try:
            SendGridAPIClient(self.api_key).send(message)
            return True
        except Exception as e:
            logger.exception("Email send failed: %s", e)
            return False

    def _expiry_text(self) -> str:
        minutes = self.reset_expire_minutes
        if minutes % 60 == 0:
            hours = minutes // 60
            return f"{hours} hour" if hours == 1 else f"{hours} hours"
        return f"{minutes} minutes"

    def _build_reset_email_html(self, *, name: str, reset_url: str) -> str:
        name = html.escape(name)
        reset_url = html.escape(reset_url)
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Password Reset Request</h2>
            <p>Hello {name},</p>
            <p>We received a request to reset the password for your {self.app_name} account.</p>
            <p><a href="{reset_url}">Reset Password</a></p>
            <p>If the link doesn't work, copy this address into your browser:</p>
            <p>{reset_url}</p>
            <p>This link expires in {self._expiry_text()}. If you didn't request a reset, ignore this email.</p>
        </div>
        """

    def _build_welcome_email_html(self, *, name: str) -> str:
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Welcome to {self.app_name}!</h2>
            <p>Hello {html.escape(name)},</p>
            <p>Your account has been created. You can now sign in and start learning.</p>
            <p><a href="{html.escape(self.frontend_url)}/login">Sign in</a></p>
        </div>
        """


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        settings = get_settings()
        _email_service = EmailService(
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.SENDGRID_FROM_EMAIL,
            frontend_url=settings.FRONTEND_URL,
            reset_expire_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
        )
    return _email_service
