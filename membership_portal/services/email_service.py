"""Email service for member notifications (SMTP).

Delivery is best effort: failures are logged and reported in the result dict,
never raised to the caller.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from membership_portal.config import Settings, settings

logger = logging.getLogger(__name__)

ASSOCIATION_NAME = "Recyclers Association of Nigeria"

_HTML_WRAPPER = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #166534;">{heading}</h2>
    {body}
    <br/>
    <p>Best Regards,<br/><strong>RAN Secretariat</strong></p>
</body>
</html>"""


class EmailService:
    """SMTP email sender"""

    def __init__(
        self,
        from_email: Optional[str] = None,
        from_name: str = "Membership Secretariat",
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        self.from_email = from_email
        self.from_name = from_name
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password

    @classmethod
    def from_settings(cls, config: Settings) -> "EmailService":
        return cls(
            from_email=config.email_from,
            from_name=config.email_from_name,
            smtp_host=config.smtp_host,
            smtp_port=config.smtp_port,
            smtp_username=config.smtp_username,
            smtp_password=config.smtp_password,
        )

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host and self.from_email and self.smtp_username and self.smtp_password)

    def send_email(
        self,
        to_email: str,
        subject: str,
        plain_content: str,
        html_content: str,
    ) -> dict:
        """Send an email over SMTP with STARTTLS."""
        if not self.configured:
            logger.info(f"Email not configured, skipping '{subject}' to {to_email}")
            return {"sent": False, "error": "SMTP is not configured"}

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email

        msg.attach(MIMEText(plain_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.from_email, [to_email], msg.as_string())
            logger.info(f"Email sent to {to_email}: {subject}")
            return {"sent": True}
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"SMTP email error: {exc}")
            return {"sent": False, "error": str(exc)}

    def send_welcome(self, to_email: str, first_name: str, last_name: str) -> dict:
        """Registration received; the account awaits approval."""
        subject = f"Registration Received - {ASSOCIATION_NAME}"

        plain_content = f"""Dear {first_name} {last_name},

Thank you for submitting your membership registration application.

Your current status: Pending Approval

Our administrative team has received your business details and documents. We will review your application shortly.
Once it is approved you will receive another email and will be able to log in to the portal.

Best Regards,
RAN Secretariat"""

        html_content = _HTML_WRAPPER.format(
            heading=f"Welcome to the {ASSOCIATION_NAME}",
            body=f"""
    <p>Dear {first_name} {last_name},</p>
    <p>Thank you for submitting your membership registration application.</p>
    <p><strong>Your Current Status: <span style="color: #eab308;">Pending Approval</span></strong></p>
    <p>Our administrative team has received your business details and documents. We will review your application shortly.</p>
    <p>Once it is approved you will receive another email and will be able to log in to the portal.</p>""",
        )

        return self.send_email(to_email, subject, plain_content, html_content)

    def send_reset_code(self, to_email: str, token: str, ttl_minutes: int = 60) -> dict:
        subject = f"Password Reset - {ASSOCIATION_NAME}"
        plain_content = f"Your password reset code is: {token}. This code expires in {ttl_minutes} minutes."
        html_content = _HTML_WRAPPER.format(
            heading="Password Reset",
            body=f"""
    <p>Your password reset code is:</p>
    <p style="font-size: 24px; font-weight: bold; letter-spacing: 4px;">{token}</p>
    <p>This code expires in {ttl_minutes} minutes. If you did not request a reset you can ignore this email.</p>""",
        )
        return self.send_email(to_email, subject, plain_content, html_content)

    def send_expiry_reminder(self, to_email: str, first_name: str, expiry_date: str, days_left: int) -> dict:
        subject = f"Membership Renewal Reminder - {ASSOCIATION_NAME}"
        plain_content = f"""Dear {first_name},

Your membership expires on {expiry_date} ({days_left} days from today).
Please log in to the portal and submit your renewal payment to keep your membership active.

Best Regards,
RAN Secretariat"""
        html_content = _HTML_WRAPPER.format(
            heading="Membership Renewal Reminder",
            body=f"""
    <p>Dear {first_name},</p>
    <p>Your membership expires on <strong>{expiry_date}</strong> ({days_left} days from today).</p>
    <p>Please log in to the portal and submit your renewal payment to keep your membership active.</p>""",
        )
        return self.send_email(to_email, subject, plain_content, html_content)


# Singleton instance (initialized lazily)
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get or create the email service singleton."""
    global _email_service

    if _email_service is None:
        _email_service = EmailService.from_settings(settings)

    return _email_service
