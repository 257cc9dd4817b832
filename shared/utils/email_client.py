import smtplib
import logging
import time
from contextlib import contextmanager
from email.message import EmailMessage
from typing import List, Optional

logger = logging.getLogger(__name__)


class EmailClient:
    """SMTP client used for account notifications (password reset codes)."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        max_attempts: int = 2,
        retry_delay: float = 2,
        timeout: int = 10
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.timeout = timeout

    @contextmanager
    def _connection(self):
        smtp_class = smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP
        server = smtp_class(self.smtp_host, self.smtp_port, timeout=self.timeout)
        try:
            if not self.use_ssl:
                server.starttls()
            # relays on a private network often accept mail without login
            if self.username:
                server.login(self.username, self.password or "")
            yield server
        finally:
            try:
                server.quit()
            except smtplib.SMTPException as e:
                logger.warning(f"Error closing SMTP connection: {e}")

    @staticmethod
    def build_message(sender: str, recipients: List[str], subject: str,
                      text_body: str, html_body: Optional[str] = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(text_body or "")
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send_email(
        self,
        sender: str,
        recipients: List[str],
        subject: str,
        text_body: str,
        html_body: Optional[str] = None
    ) -> bool:
        """Returns False instead of raising; callers treat mail as best-effort."""
        message = self.build_message(sender, recipients, subject, text_body, html_body)

        for attempt in range(1, self.max_attempts + 1):
            try:
                with self._connection() as server:
                    server.send_message(message)
                logger.info(f"Email '{subject}' sent to {', '.join(recipients)}")
                return True
            except smtplib.SMTPAuthenticationError:
                logger.error("SMTP authentication failed, check SMTP_USERNAME/SMTP_PASSWORD")
                return False
            except (smtplib.SMTPException, OSError) as e:
                logger.error(f"Email attempt {attempt}/{self.max_attempts} failed: {e}")
                if attempt < self.max_attempts:
                    time.sleep(self.retry_delay)

        return False
