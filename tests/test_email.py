import smtplib

from shared.core.config import settings
from shared.helpers.email_helper import EmailHelper
from shared.utils.email_client import EmailClient


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.sent = []
        FakeSMTP.instances.append(self)

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def send_message(self, message):
        self.sent.append(message)

    def quit(self):
        pass


def test_otp_mail_is_sent_through_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    helper = EmailHelper(EmailClient("smtp.test", 587, "user", "pw"))

    assert helper.send_password_reset_otp("a@x.com", "123456") is True

    message = FakeSMTP.instances[0].sent[0]
    assert message["To"] == "a@x.com"
    assert "123456" in message.get_content()


def test_unreachable_server_reports_failure(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no server")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    client = EmailClient("smtp.test", 587, max_attempts=2, retry_delay=0)

    assert client.send_email("from@x.com", ["a@x.com"], "Hi", "body") is False


def test_missing_smtp_configuration_skips_sending(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", None)

    assert EmailHelper().send_password_reset_otp("a@x.com", "123456") is False
