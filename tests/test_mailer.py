"""SMTP transport, transport selection and notifier retry behaviour."""

import smtplib
import warnings

import pytest

from auth.notifications import Notifier
from conftest import RecordingMailer, make_settings
from core.errors import AppError, ErrorKind
from core.mailer import LogMailer, MailDeliveryError, SmtpMailer, build_mailer


class FakeSMTP:
    instances = []
    fail_with = None

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls = []
        FakeSMTP.instances.append(self)
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self.calls.append(("send", msg))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def test_smtp_mailer_sends_multipart_message(fake_smtp):
    mailer = SmtpMailer("smtp.test", 587, "farm@x.com", username="u", password="p", timeout=5)
    mailer.send("alice@x.com", "Hello", "plain body", "<p>html body</p>")

    smtp = fake_smtp.instances[0]
    assert (smtp.host, smtp.port, smtp.timeout) == ("smtp.test", 587, 5)
    assert smtp.calls[0] == "starttls"
    assert smtp.calls[1] == ("login", "u", "p")
    msg = smtp.calls[2][1]
    assert msg["To"] == "alice@x.com"
    assert msg["From"] == "farm@x.com"
    assert msg["Subject"] == "Hello"
    assert msg.get_body(("plain",)).get_content().strip() == "plain body"
    assert "html body" in msg.get_body(("html",)).get_content()


def test_smtp_mailer_without_tls_or_credentials(fake_smtp):
    SmtpMailer("smtp.test", 25, "farm@x.com", use_tls=False).send("a@x.com", "s", "t")
    calls = fake_smtp.instances[0].calls
    assert len(calls) == 1 and calls[0][0] == "send"


def test_smtp_errors_become_delivery_errors(fake_smtp):
    fake_smtp.fail_with = ConnectionRefusedError("refused")
    with pytest.raises(MailDeliveryError):
        SmtpMailer("smtp.test", 587, "farm@x.com").send("a@x.com", "s", "t")


def test_build_mailer_falls_back_to_log_transport():
    assert isinstance(build_mailer(make_settings(smtp_host="")), LogMailer)
    assert isinstance(build_mailer(make_settings(smtp_host="smtp.test")), SmtpMailer)


def _notifier(mailer, attempts=3):
    return Notifier(mailer, frontend_url="http://frontend.test/", reset_ttl_minutes=60,
                    attempts=attempts, backoff_seconds=0)


def test_notifier_retries_transient_failures():
    mailer = RecordingMailer(failures=2)
    _notifier(mailer).send_password_reset("alice@x.com", "tok")
    assert mailer.attempts == 3
    assert len(mailer.sent) == 1


def test_reset_mail_failure_raises_after_last_attempt():
    mailer = RecordingMailer(failures=-1)
    with pytest.raises(AppError) as exc_info:
        _notifier(mailer).send_password_reset("alice@x.com", "tok")
    assert exc_info.value.kind is ErrorKind.NOTIFICATION_FAILURE
    assert mailer.attempts == 3


def test_welcome_failure_is_swallowed_and_logged(caplog):
    mailer = RecordingMailer(failures=-1)
    with caplog.at_level("ERROR", logger="dairyfarm"):
        _notifier(mailer, attempts=2).send_welcome("alice@x.com", "Alice")
    assert mailer.attempts == 2
    assert "Failed to send welcome email" in caplog.text


def test_welcome_html_escapes_the_name():
    mailer = RecordingMailer()
    _notifier(mailer).send_welcome("alice@x.com", "<b>Alice</b>")
    assert "&lt;b&gt;Alice&lt;/b&gt;" in mailer.sent[0]["html"]
    assert "Welcome <b>Alice</b>!" in mailer.sent[0]["text"]


def test_reset_link_is_built_from_frontend_url():
    link = _notifier(RecordingMailer()).reset_link("a.b-c_d")
    assert link == "http://frontend.test/reset-password?token=a.b-c_d"


def test_retry_policy_raises_no_deprecation_warnings():
    mailer = RecordingMailer(failures=1)
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        _notifier(mailer, attempts=2).send_password_reset("alice@x.com", "tok")
    assert mailer.attempts == 2
