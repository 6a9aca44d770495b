"""bin/seed_admin.py bootstrap."""

import importlib.util
from pathlib import Path

import pytest

from auth.store import UserStore
from conftest import make_settings
from core.security import PasswordHasher
from database import Base, build_engine, build_session_factory

_SCRIPT = Path(__file__).resolve().parents[1] / "bin" / "seed_admin.py"


@pytest.fixture(scope="module")
def seed_admin():
    spec = importlib.util.spec_from_file_location("seed_admin", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'seed.db'}"
    Base.metadata.create_all(build_engine(url))
    return url


def test_creates_admin_once(seed_admin, db_url):
    settings = make_settings(
        database_url=db_url,
        first_admin_name="Farm Owner",
        first_admin_email="owner@example.com",
        first_admin_password="owner-pass",
    )

    assert seed_admin.seed(settings) is True
    assert seed_admin.seed(settings) is False

    db = build_session_factory(build_engine(db_url))()
    try:
        user = UserStore(db).find_by_email("owner@example.com")
        assert user.role == "ADMIN"
        assert user.name == "Farm Owner"
        assert PasswordHasher(rounds=1000).verify("owner-pass", user.password_hash)
    finally:
        db.close()


def test_nothing_to_do_without_credentials(seed_admin, db_url):
    assert seed_admin.seed(make_settings(database_url=db_url, first_admin_email="")) is False
