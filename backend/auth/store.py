# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Credential store – every user-record read and write the auth flows need.

Email uniqueness is enforced by the ``users.email`` unique constraint: a
losing concurrent insert surfaces as ``IntegrityError`` and is translated to
``DUPLICATE_EMAIL`` here, never by a read-then-write check alone.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import AppError, ErrorKind
from models.password_reset import PasswordResetToken
from models.user import Role, User


def _digest(token_id: str) -> str:
    return hashlib.sha256(token_id.encode("utf-8")).hexdigest()


class UserStore:
    def __init__(self, db: Session):
        self._db = db

    # -- lookups ----------------------------------------------------------------

    def find_by_email(self, email: str) -> Optional[User]:
        return self._db.query(User).filter(User.email == email).first()

    def get(self, user_id: str) -> Optional[User]:
        return self._db.get(User, user_id)

    # -- mutations --------------------------------------------------------------

    def create(self, name: str, email: str, password_hash: str, role: str = Role.USER.value) -> User:
        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise AppError(ErrorKind.DUPLICATE_EMAIL) from None
        self._db.refresh(user)
        return user

    def update_password(self, user_id: str, new_hash: str) -> None:
        """Replace the stored hash.  Also commits any pending reset-token
        consumption in the same transaction."""
        user = self.get(user_id)
        if user is None:
            self._db.rollback()
            raise AppError(ErrorKind.NOT_FOUND, "User not found")
        user.password_hash = new_hash
        self._db.commit()

    def update_name(self, user_id: str, new_name: str) -> User:
        user = self.get(user_id)
        if user is None:
            raise AppError(ErrorKind.NOT_FOUND, "User not found")
        user.name = new_name
        self._db.commit()
        self._db.refresh(user)
        return user

    # -- password-reset single-use markers -------------------------------------

    def record_reset_token(self, user_id: str, token_id: str, expires_at: datetime) -> None:
        self._db.add(PasswordResetToken(
            user_id=user_id,
            token_hash=_digest(token_id),
            expires_at=expires_at,
        ))
        self._db.commit()

    def consume_reset_token(self, token_id: str, user_id: str) -> bool:
        """
        Mark the reset token as used.  Returns True only for the first caller,
        and only while the token is unexpired and belongs to *user_id*.

        The conditional UPDATE is the atomicity boundary: two concurrent
        confirmations cannot both see rowcount == 1.  The change is flushed but
        not committed – :meth:`update_password` commits both together.
        """
        now = datetime.now(timezone.utc)
        result = self._db.execute(
            update(PasswordResetToken)
            .where(
                PasswordResetToken.token_hash == _digest(token_id),
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used_at.is_(None),
                PasswordResetToken.expires_at > now,
            )
            .values(used_at=now)
        )
        return result.rowcount == 1
