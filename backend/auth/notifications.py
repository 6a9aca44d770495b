# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Account emails – welcome and password reset.

Delivery goes through a tenacity retry loop (exponential backoff with
jitter).  What happens after the final attempt depends on the message:

* welcome        – best-effort: the failure is logged and swallowed.
* password reset – the user has no other way to recover, so the failure
                   is raised as ``NOTIFICATION_FAILURE``.
"""

from html import escape
from typing import Optional
from urllib.parse import urlencode

from tenacity import (
    Retrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from core.errors import AppError, ErrorKind
from core.logger import logger
from core.mailer import MailDeliveryError, Mailer

_WELCOME_SUBJECT = "Welcome to Dairy Farm Management"
_RESET_SUBJECT = "Password Reset Request"


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning("Email delivery attempt %d failed: %s", state.attempt_number, exc)


class Notifier:
    def __init__(
        self,
        mailer: Mailer,
        frontend_url: str,
        reset_ttl_minutes: int,
        attempts: int = 3,
        backoff_seconds: float = 1.0,
    ):
        self._mailer = mailer
        self._frontend_url = frontend_url.rstrip("/")
        self._reset_ttl_minutes = reset_ttl_minutes
        self._attempts = max(1, attempts)
        self._backoff = max(0.0, backoff_seconds)

    def _deliver(self, to: str, subject: str, text: str, html: Optional[str]) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self._attempts),
            # exponential backoff plus up to one base interval of jitter
            wait=wait_exponential(multiplier=self._backoff, max=self._backoff * 8)
            + wait_random(0, self._backoff),
            retry=retry_if_exception_type(MailDeliveryError),
            before_sleep=_log_retry,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                self._mailer.send(to, subject, text, html)

    # -- welcome ----------------------------------------------------------------

    def send_welcome(self, email: str, name: str) -> None:
        """Best-effort.  Never raises; meant to run as a background task."""
        text = (
            f"Welcome {name}!\n\n"
            "Your account has been created successfully.\n"
            "You can now log in to the Dairy Farm Management system.\n\n"
            "Best regards,\n"
            "Dairy Farm Management Team\n"
        )
        html = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            "<h2>Welcome to Dairy Farm Management!</h2>"
            f"<p>Hello {escape(name)},</p>"
            "<p>Your account has been created successfully.</p>"
            "<p>You can now log in to the Dairy Farm Management system and start "
            "managing your dairy operations.</p>"
            "<p>Best regards,<br>Dairy Farm Management Team</p>"
            "</div>"
        )
        try:
            self._deliver(email, _WELCOME_SUBJECT, text, html)
        except Exception:
            logger.exception("Failed to send welcome email")

    # -- password reset ---------------------------------------------------------

    def reset_link(self, token: str) -> str:
        return f"{self._frontend_url}/reset-password?{urlencode({'token': token})}"

    def send_password_reset(self, email: str, token: str) -> None:
        """Raises ``AppError(NOTIFICATION_FAILURE)`` when delivery fails."""
        link = self.reset_link(token)
        text = (
            "You requested a password reset for your Dairy Farm Management account.\n\n"
            f"Open the following link to reset your password:\n{link}\n\n"
            f"This link will expire in {self._reset_ttl_minutes} minutes and can be used once.\n\n"
            "If you didn't request this, please ignore this email.\n"
        )
        html = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            "<h2>Password Reset Request</h2>"
            "<p>You requested a password reset for your Dairy Farm Management account.</p>"
            "<p>Click the button below to reset your password:</p>"
            f'<a href="{link}" style="background-color: #007bff; color: white; padding: 10px 20px; '
            'text-decoration: none; border-radius: 5px; display: inline-block;">Reset Password</a>'
            f"<p>This link will expire in {self._reset_ttl_minutes} minutes and can be used once.</p>"
            "<p>If you didn't request this, please ignore this email.</p>"
            "</div>"
        )
        try:
            self._deliver(email, _RESET_SUBJECT, text, html)
        except MailDeliveryError as exc:
            logger.error("Failed to send password reset email: %s", exc)
            raise AppError(ErrorKind.NOTIFICATION_FAILURE, "Failed to send password reset email") from exc
