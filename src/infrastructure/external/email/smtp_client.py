# File: src/infrastructure/external/email/smtp_client.py

import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from common.config.settings import settings
from common.logging.logger import log_info, log_error


class EmailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot take a message."""


def redact_email(email: str) -> str:
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def send_email(to: str, subject: str, html_body: str, text_body: Optional[str] = None) -> None:
    """
    Deliver one message over SMTP. Blocking; call it through a thread pool.

    With MOCK_EMAIL the message is only logged (never its body, which may
    carry a one-time code).

    Raises:
        EmailDeliveryError: If SMTP is not configured or delivery fails.
    """
    if settings.MOCK_EMAIL:
        log_info("MOCK email sent", extra={"to": redact_email(to), "subject": subject})
        return

    sender = settings.EMAIL_FROM or settings.SMTP_USER
    if not settings.SMTP_HOST or not sender:
        log_error("SMTP_HOST / EMAIL_FROM not set in environment.")
        raise EmailDeliveryError("Email delivery is not configured")

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to
    if text_body:
        msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))

    context = ssl.create_default_context()
    try:
        if settings.SMTP_USE_TLS:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                server.starttls(context=context)
                if settings.SMTP_USER and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.sendmail(sender, to, msg.as_string())
        else:
            with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, context=context, timeout=30) as server:
                if settings.SMTP_USER and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.sendmail(sender, to, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        log_error("Failed to send email", extra={"to": redact_email(to), "host": settings.SMTP_HOST, "error": str(e)})
        raise EmailDeliveryError(str(e)) from e

    log_info("Email sent", extra={"to": redact_email(to), "subject": subject})
