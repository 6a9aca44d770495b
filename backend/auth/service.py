# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Authentication flows – register, login, password reset, profile.

Every flow is stateless across requests; the only carry-over is the signed
token handed to the client.

Security notes
--------------
* Login returns the *same* error whether the email doesn't exist or the
  password is wrong, and spends the same hashing time in both cases.
* A reset request for an unknown email returns the same generic success
  message as a real one and sends nothing.
* Reset tokens carry their own audience and a single-use marker, so they
  are useless as session tokens and work at most once.
"""

from dataclasses import dataclass
from typing import Any, Callable

from auth.notifications import Notifier
from auth.store import UserStore
from core.errors import AppError, ErrorKind
from core.logger import logger
from core.security import PasswordHasher
from core.tokens import TokenClaims, TokenPurpose, TokenService
from models.user import Role, User

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent"

# Runs a callable later (FastAPI BackgroundTasks.add_task) or right away
Dispatch = Callable[..., Any]


def _run_now(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    fn(*args, **kwargs)


@dataclass
class AuthResult:
    user: User
    token: str


class AuthService:
    def __init__(
        self,
        store: UserStore,
        tokens: TokenService,
        hasher: PasswordHasher,
        notifier: Notifier,
        dispatch: Dispatch = _run_now,
    ):
        self._store = store
        self._tokens = tokens
        self._hasher = hasher
        self._notifier = notifier
        self._dispatch = dispatch

    @staticmethod
    def _claims(user: User) -> TokenClaims:
        return TokenClaims(user_id=user.id, email=user.email, role=user.role)

    # -- register -----------------------------------------------------------------

    def register(self, name: str, email: str, password: str, role: str = Role.USER.value) -> AuthResult:
        if self._store.find_by_email(email) is not None:
            raise AppError(ErrorKind.DUPLICATE_EMAIL)

        # The unique constraint still guards the race between two registrations
        user = self._store.create(name, email, self._hasher.hash(password), role)
        token = self._tokens.issue(self._claims(user))

        # Welcome mail never blocks or fails the registration
        self._dispatch(self._notifier.send_welcome, user.email, user.name)

        logger.info("User %s registered with role %s", user.id, user.role)
        return AuthResult(user=user, token=token)

    # -- login --------------------------------------------------------------------

    def login(self, email: str, password: str) -> AuthResult:
        user = self._store.find_by_email(email)

        # Unified failure path – no information leaks about whether the email exists
        if user is None:
            self._hasher.dummy_verify(password)
            raise AppError(ErrorKind.INVALID_CREDENTIALS)
        if not self._hasher.verify(password, user.password_hash):
            raise AppError(ErrorKind.INVALID_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return AuthResult(user=user, token=self._tokens.issue(self._claims(user)))

    # -- password reset -----------------------------------------------------------

    def request_password_reset(self, email: str) -> str:
        """Return the message for the client.  Raises NOTIFICATION_FAILURE
        only when an existing account's reset mail cannot be delivered."""
        user = self._store.find_by_email(email)
        if user is None:
            return RESET_REQUESTED_MESSAGE

        ticket = self._tokens.issue_reset(self._claims(user))
        self._store.record_reset_token(user.id, ticket.token_id, ticket.expires_at)
        self._notifier.send_password_reset(user.email, ticket.token)

        logger.info("Password reset requested for user %s", user.id)
        return RESET_REQUESTED_MESSAGE

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        payload = self._tokens.decode(token, TokenPurpose.PASSWORD_RESET)

        if not self._store.consume_reset_token(payload["jti"], payload["sub"]):
            raise AppError(ErrorKind.INVALID_TOKEN)
        try:
            self._store.update_password(payload["sub"], self._hasher.hash(new_password))
        except AppError:
            # user vanished after the token was issued
            raise AppError(ErrorKind.INVALID_TOKEN) from None

        logger.info("Password reset completed for user %s", payload["sub"])

    # -- profile ------------------------------------------------------------------

    def get_profile(self, identity: TokenClaims) -> User:
        user = self._store.get(identity.user_id)
        if user is None:
            raise AppError(ErrorKind.NOT_FOUND, "User not found")
        return user

    def update_profile(self, identity: TokenClaims, name: str) -> User:
        return self._store.update_name(identity.user_id, name)
