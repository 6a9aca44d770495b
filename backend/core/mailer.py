# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Outbound email transports.

Both transports expose ``send(to, subject, text, html=None)`` and raise
:class:`MailDeliveryError` when the message could not be handed over.
Retrying and deciding whether a failure matters is the caller's job
(see ``auth.notifications``).
"""

import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional, Protocol

from core.config import Settings
from core.logger import logger


class MailDeliveryError(Exception):
    """The transport could not deliver a message."""


class Mailer(Protocol):
    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        ...


def _build_message(sender: str, to: str, subject: str, text: str, html: Optional[str]) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)
    if html:
        msg.add_alternative(html, subtype="html")
    return msg


class SmtpMailer:
    """Deliver through an SMTP relay, upgrading with STARTTLS when enabled."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        msg = _build_message(self._sender, to, subject, text, html)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery to {self._host}:{self._port} failed") from exc
        logger.info("Email '%s' sent via %s", subject, self._host)


class LogMailer:
    """Development transport: records the message in the log instead of
    sending it.  Bodies are not logged – reset links are credentials."""

    def __init__(self, sender: str):
        self._sender = sender

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        logger.info("SMTP not configured – email '%s' from %s not delivered", subject, self._sender)


def build_mailer(settings: Settings) -> Mailer:
    if not settings.smtp_host:
        return LogMailer(settings.mail_from)
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.mail_from,
        username=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )
