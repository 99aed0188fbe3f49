# File: src/domain/notification/services/email_service.py

from starlette.concurrency import run_in_threadpool

from common.config.settings import settings
from common.exceptions.base_exception import ServiceUnavailableException
from infrastructure.external.email.smtp_client import EmailDeliveryError, send_email

OTP_SUBJECT = "Your OTP for QV"


def render_otp_email(otp: str, expire_minutes: int) -> str:
    return (
        f"<h1>Your OTP is {otp}</h1>"
        f"<p>This OTP will expire in {expire_minutes} minutes.</p>"
        "<p>Thank you for using QV!</p>"
        "<p>The QV Team.</p>"
        "<p>This is an automated email, please do not reply to this email.</p>"
        "<p>If you did not request this OTP, please ignore this email.</p>"
    )


class EmailService:
    """Sends the admin one-time passcodes."""

    def __init__(self, otp_expire_minutes: int = settings.OTP_EXPIRE_MINUTES):
        self.otp_expire_minutes = otp_expire_minutes

    async def send_otp(self, email: str, otp: str) -> None:
        """
        Raises:
            ServiceUnavailableException: When delivery fails, so the caller's
                transaction is rolled back.
        """
        html = render_otp_email(otp, self.otp_expire_minutes)
        text = f"Your OTP is {otp}. It expires in {self.otp_expire_minutes} minutes."
        try:
            await run_in_threadpool(send_email, email, OTP_SUBJECT, html, text)
        except EmailDeliveryError as e:
            raise ServiceUnavailableException("Failed to send email") from e
