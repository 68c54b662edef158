"""
Verification email delivery over SMTP.
"""
import smtplib
from email.message import EmailMessage
from typing import Protocol
from urllib.parse import urlencode

from todo_api.core.config import settings
from todo_api.core.exceptions import EmailDeliveryError
from todo_api.core.logging_config import logger


class VerificationSender(Protocol):
    """Delivers the link a user follows to prove control of their email."""

    def send_verification_email(self, email: str, token: str) -> None:
        ...


def build_verification_message(
    to_email: str,
    token: str,
    from_email: str = settings.MAIL_FROM,
    verification_url: str = settings.verification_url,
    expire_hours: int = settings.VERIFICATION_TOKEN_EXPIRE_HOURS,
) -> EmailMessage:
    link = f"{verification_url}?{urlencode({'token': token})}"
    body = f"""Hello,

Please verify your email by clicking the link below:

{link}

This link will expire in {expire_hours} hours.

Best regards,
Good Todo Team"""

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = "Please verify your email"
    msg.set_content(body)
    return msg


class SmtpVerificationSender:
    """Sends verification emails through a plain SMTP relay (Mailpit/Mailhog in development)."""

    def __init__(self, host: str = settings.SMTP_HOST, port: int = settings.SMTP_PORT, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.timeout = timeout

    def send_verification_email(self, email: str, token: str) -> None:
        msg = build_verification_message(email, token)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.send_message(msg)
        except (OSError, smtplib.SMTPException) as e:
            logger.error(f"Failed to send verification email to {email}: {type(e).__name__}: {e}")
            raise EmailDeliveryError() from e

        logger.info(f"Verification email sent to {email}")


email_sender = SmtpVerificationSender()
