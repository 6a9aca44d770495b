"""Central error mapping: every failure renders the same envelope."""

import pytest
from fastapi.testclient import TestClient

from core.errors import AppError, ErrorKind


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.VALIDATION_FAILURE, 400),
        (ErrorKind.DUPLICATE_EMAIL, 400),
        (ErrorKind.INVALID_CREDENTIALS, 401),
        (ErrorKind.INVALID_TOKEN, 400),
        (ErrorKind.MISSING_TOKEN, 401),
        (ErrorKind.UNAUTHENTICATED, 401),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.RATE_LIMITED, 429),
        (ErrorKind.NOTIFICATION_FAILURE, 500),
        (ErrorKind.INTERNAL, 500),
    ],
)
def test_every_kind_has_a_status(kind, status):
    assert AppError(kind).status_code == status


def test_message_override_and_field_errors():
    err = AppError(ErrorKind.VALIDATION_FAILURE, "Bad input", errors=[{"field": "name", "message": "too short"}])
    assert err.to_body() == {
        "success": False,
        "message": "Bad input",
        "errors": [{"field": "name", "message": "too short"}],
    }
    assert "errors" not in AppError(ErrorKind.NOT_FOUND).to_body()


def test_unexpected_exception_is_a_generic_500(app, caplog):
    @app.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    with TestClient(app, raise_server_exceptions=False) as client:
        res = client.get("/boom")

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Internal server error"}
    assert "hunter2" not in res.text
    assert "Unhandled exception on GET /boom" in caplog.text


def test_unknown_route_uses_the_envelope(client):
    res = client.get("/no-such-route")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Not Found"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
