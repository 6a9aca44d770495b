# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Signed, time-bounded bearer tokens (PyJWT / HS256).

Two purposes share the same signing key but never each other's tokens:

* ``session``        – issued at login / registration, 7 day default TTL.
* ``password_reset`` – issued by the reset-request flow, short TTL, carries
                       a unique ``jti`` that the credential store records so
                       the token can be consumed exactly once.

The purpose is carried in the standard ``aud`` claim, so PyJWT rejects a
token presented to the wrong verifier.  Every verification failure –
malformed, bad signature, expired, wrong audience – surfaces as the same
``INVALID_TOKEN`` error.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import jwt as _jwt        # PyJWT

from core.errors import AppError, ErrorKind

_ALGORITHM = "HS256"
_BEARER_PREFIX = "Bearer "


class TokenPurpose(str, Enum):
    SESSION = "session"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenClaims:
    """The identity asserted by a token."""

    user_id: str
    email: str
    role: str


@dataclass(frozen=True)
class ResetTicket:
    token: str
    token_id: str
    expires_at: datetime


class TokenService:
    def __init__(
        self,
        secret_key: str,
        session_ttl: timedelta,
        reset_ttl: timedelta,
    ):
        if not secret_key:
            # Fatal start-up misconfiguration, never a user-facing error
            raise RuntimeError("SECRET_KEY must be set to sign tokens")
        self._secret = secret_key
        self._session_ttl = session_ttl
        self._reset_ttl = reset_ttl

    # -- issuing --------------------------------------------------------------

    def _encode(self, claims: TokenClaims, purpose: TokenPurpose, ttl: timedelta, token_id: str) -> tuple[str, datetime]:
        now = datetime.now(timezone.utc)
        expires_at = now + ttl
        payload = {
            "sub": claims.user_id,
            "email": claims.email,
            "role": claims.role,
            "aud": purpose.value,
            "jti": token_id,
            "iat": now,
            "exp": expires_at,
        }
        return _jwt.encode(payload, self._secret, algorithm=_ALGORITHM), expires_at

    def issue(self, claims: TokenClaims) -> str:
        """Sign a session token for *claims*."""
        token, _ = self._encode(claims, TokenPurpose.SESSION, self._session_ttl, uuid.uuid4().hex)
        return token

    def issue_reset(self, claims: TokenClaims) -> ResetTicket:
        """Sign a password-reset token.  The returned ``token_id`` must be
        recorded by the caller so the token can later be consumed once."""
        token_id = uuid.uuid4().hex
        token, expires_at = self._encode(claims, TokenPurpose.PASSWORD_RESET, self._reset_ttl, token_id)
        return ResetTicket(token=token, token_id=token_id, expires_at=expires_at)

    # -- verifying ------------------------------------------------------------

    def decode(self, token: str, purpose: TokenPurpose = TokenPurpose.SESSION) -> dict:
        """
        Verify signature, expiry and audience and return the raw claim set.
        Raises ``AppError(INVALID_TOKEN)`` on any failure.
        """
        try:
            payload = _jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=purpose.value,
                options={"require": ["sub", "exp", "iat", "aud", "jti"]},
            )
        except _jwt.PyJWTError:
            raise AppError(ErrorKind.INVALID_TOKEN) from None

        if not all(isinstance(payload.get(key), str) for key in ("sub", "email", "role")):
            raise AppError(ErrorKind.INVALID_TOKEN)
        return payload

    def verify(self, token: str, purpose: TokenPurpose = TokenPurpose.SESSION) -> TokenClaims:
        payload = self.decode(token, purpose)
        return TokenClaims(user_id=payload["sub"], email=payload["email"], role=payload["role"])

    # -- transport ------------------------------------------------------------

    @staticmethod
    def extract_bearer(header_value: Optional[str]) -> str:
        """
        Return the token from an ``Authorization: Bearer <token>`` header.
        The prefix match is exact (case-sensitive, single space).
        """
        if not header_value or not header_value.startswith(_BEARER_PREFIX):
            raise AppError(ErrorKind.MISSING_TOKEN)
        token = header_value[len(_BEARER_PREFIX):]
        if not token:
            raise AppError(ErrorKind.MISSING_TOKEN)
        return token
