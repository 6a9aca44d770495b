# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first ADMIN user.

Run once after the initial migration:
    python bin/seed_admin.py

The script reads FIRST_ADMIN_NAME, FIRST_ADMIN_EMAIL and FIRST_ADMIN_PASSWORD
from the environment or etc/app.conf.  After the row is inserted those
values are no longer used by the application.  Public registration always
creates accounts through the same credential store, so the unique email
constraint applies here too.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable without installing the project
# ---------------------------------------------------------------------------
# bin/seed_admin.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from auth.store import UserStore                                   # noqa: E402
from core.config import Settings                                   # noqa: E402
from core.errors import AppError                                   # noqa: E402
from core.logger import logger                                     # noqa: E402
from core.security import PasswordHasher                           # noqa: E402
from database import build_engine, build_session_factory           # noqa: E402
from models.user import Role                                       # noqa: E402


def seed(settings: Settings) -> bool:
    """Create the admin account.  Returns True when a row was inserted."""
    if not settings.first_admin_email or not settings.first_admin_password:
        logger.warning("FIRST_ADMIN_EMAIL or FIRST_ADMIN_PASSWORD not set – nothing to do")
        return False

    session_factory = build_session_factory(build_engine(settings.database_url))
    db = session_factory()
    try:
        store = UserStore(db)
        if store.find_by_email(settings.first_admin_email):
            logger.info("Admin '%s' already exists – skipping", settings.first_admin_email)
            return False

        hasher = PasswordHasher(rounds=settings.password_hash_rounds)
        try:
            user = store.create(
                settings.first_admin_name,
                settings.first_admin_email,
                hasher.hash(settings.first_admin_password),
                Role.ADMIN.value,
            )
        except AppError:
            # Lost a race with a concurrent registration of the same email
            logger.info("Admin '%s' already exists – skipping", settings.first_admin_email)
            return False
        logger.info("Admin '%s' created with id %s", user.email, user.id)
        return True
    finally:
        db.close()


if __name__ == "__main__":
    seed(Settings())
