# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Password hashing.  No other module should touch raw password crypto.

passlib pbkdf2_sha256 – pure Python, no glibc constraint.  bcrypt 4.x abi3
wheels require GLIBC_2.34 and cannot load on RHEL 8, so PBKDF2-SHA256 is used
instead; it is salted per hash, adaptive through its round count, and the
salt is embedded in the hash string (passlib convention).
"""

from typing import Optional

from passlib.hash import pbkdf2_sha256 as _pbkdf2


class PasswordHasher:
    def __init__(self, rounds: int = 600_000):
        self._scheme = _pbkdf2.using(rounds=rounds)
        self._dummy_hash: Optional[str] = None

    def hash(self, plain: str) -> str:
        """Return the full passlib hash string, e.g. ``$pbkdf2-sha256$...``."""
        return self._scheme.hash(plain)

    def verify(self, plain: str, stored_hash: str) -> bool:
        """
        Constant-time verification of *plain* against a hash produced by
        :meth:`hash`.  A malformed stored hash counts as a mismatch.
        """
        try:
            return self._scheme.verify(plain, stored_hash)
        except ValueError:
            return False

    def dummy_verify(self, plain: str) -> None:
        """
        Burn the same CPU time as a real verification.  Called when a login
        email is unknown so response timing does not reveal account existence.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._scheme.hash("dummy-password-for-timing")
        self._scheme.verify(plain, self._dummy_hash)
