"""
Delivery of password reset codes by email.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from recipe_share.core.config import settings
from recipe_share.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


def build_reset_message(to_email: str, reset_code: str) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["Subject"] = "Password Reset Request"
    message["From"] = settings.EMAIL_FROM
    message["To"] = to_email
    text = f"You requested a password reset. Your reset code is: {reset_code}"
    html = f"<p>You requested a password reset. Your reset code is: <strong>{reset_code}</strong></p>"
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))
    return message


def send_reset_code(to_email: str, reset_code: str) -> None:
    """
    Send the reset code over SMTP. Without SMTP_HOST (development) the code
    is only logged.
    """
    if not settings.SMTP_HOST:
        logger.info(f"SMTP not configured, reset code for {to_email}: {reset_code}")
        return

    message = build_reset_message(to_email, reset_code)
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
            server.starttls(context=ssl.create_default_context())
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
            server.sendmail(settings.EMAIL_FROM, [to_email], message.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending reset email to {to_email}: {e}")
        raise EmailDeliveryError(context={"to": to_email})
    logger.info(f"Reset email sent to {to_email}")
