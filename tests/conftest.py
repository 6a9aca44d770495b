"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database, an application built
through ``create_app`` with that database and a recording mailer, and a
``TestClient`` around it.  Password hashing uses a low round count so the
suite stays fast.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

os.environ.setdefault("DAIRYFARM_LOG_DIR", str(Path(tempfile.gettempdir()) / "dairyfarm-tests-log"))

from core.config import Settings  # noqa: E402
from core.mailer import MailDeliveryError  # noqa: E402
from database import Base, build_engine, build_session_factory  # noqa: E402
from main import create_app  # noqa: E402

import models.user  # noqa: F401, E402
import models.password_reset  # noqa: F401, E402
import models.farmer  # noqa: F401, E402
import models.milk_record  # noqa: F401, E402
import models.feed_record  # noqa: F401, E402

SECRET = "tests-secret-key-that-is-long-enough-for-hs256"
PASSWORD = "secret1"


class RecordingMailer:
    """Collects outgoing messages; fails the first ``failures`` sends
    (``failures=-1`` fails every send)."""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.attempts = 0
        self.sent: list[dict] = []

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        self.attempts += 1
        if self.failures < 0 or self.attempts <= self.failures:
            raise MailDeliveryError("relay unavailable")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite://",
        secret_key=SECRET,
        password_hash_rounds=1000,
        mail_retry_attempts=2,
        mail_retry_backoff_seconds=0,
        rate_limit_max_requests=0,
        frontend_url="http://frontend.test",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(settings, session_factory, mailer):
    return create_app(settings, session_factory=session_factory, mailer=mailer)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name="Alice", email="alice@x.com", password=PASSWORD, role=None):
    body = {"name": name, "email": email, "password": password}
    if role:
        body["role"] = role
    return client.post("/auth/register", json=body)


@pytest.fixture
def user_token(client) -> str:
    return register(client, name="Uma User", email="uma@example.com").json()["data"]["token"]


@pytest.fixture
def admin_token(client) -> str:
    return register(client, name="Ada Admin", email="ada@example.com", role="ADMIN").json()["data"]["token"]
