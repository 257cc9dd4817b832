import logging
from typing import Optional

from shared.utils.email_client import EmailClient
from shared.core.config import settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Your password reset code"
OTP_TEMPLATE = (
    "Your password reset code is {otp}.\n"
    "It expires in {minutes} minutes. If you did not ask for it, ignore this email."
)


class EmailHelper:
    """Sends account emails through the configured SMTP server."""

    def __init__(self, client: Optional[EmailClient] = None):
        self.mailer = client
        if self.mailer is None and settings.SMTP_HOST:
            self.mailer = EmailClient(
                smtp_host=settings.SMTP_HOST,
                smtp_port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                use_ssl=settings.SMTP_USE_SSL,
            )

    def send_password_reset_otp(self, email: str, otp: str) -> bool:
        if self.mailer is None:
            logger.warning(f"SMTP is not configured; reset code for {email} was not sent")
            return False

        return self.mailer.send_email(
            sender=settings.EMAIL_SENDER,
            recipients=[email],
            subject=OTP_SUBJECT,
            text_body=OTP_TEMPLATE.format(otp=otp, minutes=settings.OTP_EXPIRE_MINUTES),
        )


def get_email_helper() -> EmailHelper:
    return EmailHelper()
