"""End-to-end tests of the /auth endpoints through the ASGI app."""

import re

import pytest
from fastapi.testclient import TestClient

from conftest import PASSWORD, RecordingMailer, bearer, make_settings, register
from main import create_app


def _reset_token_from(mail: dict) -> str:
    return re.search(r"token=([^\s&]+)", mail["text"]).group(1)


# ---------------------------------------------------------------------------
# Register / login
# ---------------------------------------------------------------------------


def test_register_then_login(client):
    res = register(client)
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["email"] == "alice@x.com"
    assert user["name"] == "Alice"
    assert user["role"] == "USER"
    assert "password" not in user and "password_hash" not in user
    t1 = body["data"]["token"]

    res = client.post("/auth/login", json={"email": "alice@x.com", "password": PASSWORD})
    assert res.status_code == 200
    assert res.json()["message"] == "Login successful"
    t2 = res.json()["data"]["token"]

    ids = {client.get("/auth/profile", headers=bearer(t)).json()["data"]["user"]["id"] for t in (t1, t2)}
    assert ids == {user["id"]}


def test_register_sends_welcome_email(client, mailer):
    register(client)
    assert [m["subject"] for m in mailer.sent] == ["Welcome to Dairy Farm Management"]
    assert mailer.sent[0]["to"] == "alice@x.com"


def test_register_duplicate_email_is_400(client):
    register(client)
    res = register(client, name="Alice Again")
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "User already exists with this email"}


def test_register_can_choose_admin_role(client):
    res = register(client, name="Ada", email="ada@x.com", role="ADMIN")
    assert res.status_code == 201
    assert res.json()["data"]["user"]["role"] == "ADMIN"


@pytest.mark.parametrize(
    "body, field",
    [
        ({"name": "A", "email": "a@x.com", "password": PASSWORD}, "name"),
        ({"name": "Alice", "email": "not-an-email", "password": PASSWORD}, "email"),
        ({"name": "Alice", "email": "a@x.com", "password": "123"}, "password"),
        ({"name": "Alice", "email": "a@x.com", "password": PASSWORD, "role": "ROOT"}, "role"),
        ({"email": "a@x.com", "password": PASSWORD}, "name"),
    ],
)
def test_register_validation_failures(client, body, field):
    res = client.post("/auth/register", json=body)
    assert res.status_code == 400
    payload = res.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation failed"
    assert field in [e["field"] for e in payload["errors"]]


def test_welcome_failure_does_not_fail_registration(session_factory):
    failing = RecordingMailer(failures=-1)
    app = create_app(make_settings(), session_factory=session_factory, mailer=failing)
    with TestClient(app) as client:
        res = register(client)
    assert res.status_code == 201
    assert failing.attempts == 2
    assert failing.sent == []


def test_login_failures_share_status_and_body(client):
    register(client)
    wrong_password = client.post("/auth/login", json={"email": "alice@x.com", "password": "wrong"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@x.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "success": False,
        "message": "Invalid email or password",
    }


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------


def test_reset_request_for_unknown_email(client, mailer):
    res = client.post("/auth/password-reset/request", json={"email": "nobody@x.com"})
    assert res.status_code == 200
    assert res.json()["success"] is True
    assert "If an account with that email exists" in res.json()["message"]
    assert mailer.attempts == 0


def test_reset_response_is_identical_for_known_and_unknown_emails(client):
    register(client)
    known = client.post("/auth/password-reset/request", json={"email": "alice@x.com"})
    unknown = client.post("/auth/password-reset/request", json={"email": "nobody@x.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_full_password_reset_flow(client, mailer):
    register(client)
    mailer.sent.clear()

    res = client.post("/auth/password-reset/request", json={"email": "alice@x.com"})
    assert res.status_code == 200
    mail = mailer.sent[-1]
    assert mail["subject"] == "Password Reset Request"
    assert "http://frontend.test/reset-password?token=" in mail["text"]
    token = _reset_token_from(mail)

    # A reset token is not a session token
    assert client.get("/auth/profile", headers=bearer(token)).status_code == 401

    res = client.post("/auth/password-reset/confirm", json={"token": token, "password": "brand-new"})
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Password reset successful"}

    assert client.post("/auth/login", json={"email": "alice@x.com", "password": PASSWORD}).status_code == 401
    assert client.post("/auth/login", json={"email": "alice@x.com", "password": "brand-new"}).status_code == 200

    # Single use
    res = client.post("/auth/password-reset/confirm", json={"token": token, "password": "again-new"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid or expired token"}


def test_confirm_with_garbage_or_session_token_is_400(client):
    session_token = register(client).json()["data"]["token"]
    for token in ("garbage", session_token):
        res = client.post("/auth/password-reset/confirm", json={"token": token, "password": "brand-new"})
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid or expired token"


def test_reset_mail_failure_is_500(session_factory):
    failing = RecordingMailer(failures=-1)
    app = create_app(make_settings(), session_factory=session_factory, mailer=failing)
    with TestClient(app) as client:
        register(client)
        failing.attempts = 0
        res = client.post("/auth/password-reset/request", json={"email": "alice@x.com"})
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Failed to send password reset email"}
    assert failing.attempts == 2


def test_reset_mail_recovers_after_transient_failure(session_factory):
    flaky = RecordingMailer()
    app = create_app(make_settings(), session_factory=session_factory, mailer=flaky)
    with TestClient(app) as client:
        register(client)
        flaky.failures, flaky.attempts = 1, 0
        res = client.post("/auth/password-reset/request", json={"email": "alice@x.com"})
    assert res.status_code == 200
    assert flaky.attempts == 2
    assert flaky.sent[-1]["subject"] == "Password Reset Request"


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer garbage"},
        {"Authorization": "bearer abc"},
        {"Authorization": "Token abc"},
        {"Authorization": "Bearer "},
    ],
)
def test_profile_requires_a_valid_bearer_token(client, headers):
    res = client.get("/auth/profile", headers=headers)
    assert res.status_code == 401
    assert res.json()["success"] is False
    assert res.json()["message"].startswith("Authentication failed")


def test_get_profile(client, user_token):
    res = client.get("/auth/profile", headers=bearer(user_token))
    assert res.status_code == 200
    user = res.json()["data"]["user"]
    assert user["email"] == "uma@example.com"
    assert user["name"] == "Uma User"
    assert "password_hash" not in user


def test_update_profile_changes_name_only(client, user_token):
    res = client.put(
        "/auth/profile",
        headers=bearer(user_token),
        json={"name": "Uma Renamed", "email": "hijack@example.com", "role": "ADMIN"},
    )
    assert res.status_code == 200
    assert res.json()["message"] == "Profile updated successfully"
    user = res.json()["data"]["user"]
    assert user["name"] == "Uma Renamed"
    assert user["email"] == "uma@example.com"
    assert user["role"] == "USER"


def test_update_profile_validates_name(client, user_token):
    res = client.put("/auth/profile", headers=bearer(user_token), json={"name": "U"})
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "name"


def test_update_profile_requires_auth(client):
    assert client.put("/auth/profile", json={"name": "Nobody"}).status_code == 401


def test_email_is_stored_and_matched_exactly_as_typed(client):
    res = register(client, email="Alice@X.com")
    assert res.status_code == 201
    assert res.json()["data"]["user"]["email"] == "Alice@X.com"

    ok = client.post("/auth/login", json={"email": "Alice@X.com", "password": PASSWORD})
    other_case = client.post("/auth/login", json={"email": "Alice@x.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert other_case.status_code == 401

    # a differently-cased address is a different account
    assert register(client, email="alice@x.com").status_code == 201
