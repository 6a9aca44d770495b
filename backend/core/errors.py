# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Application error taxonomy and the FastAPI handlers that render it.

Every domain failure is raised as :class:`AppError` tagged with an
:class:`ErrorKind`.  The HTTP status and default message for each kind live
in a single catalog, evaluated once in :func:`register_error_handlers`, so
handlers never need to inspect exception subclasses.

Response shape
--------------
    {"success": false, "message": "...", "errors": [{"field", "message"}]}

``errors`` is present only for validation failures.
"""

from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logger import logger


class ErrorKind(str, Enum):
    VALIDATION_FAILURE = "validation_failure"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    MISSING_TOKEN = "missing_token"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    NOTIFICATION_FAILURE = "notification_failure"
    INTERNAL = "internal"


# kind → (HTTP status, default client-facing message)
_CATALOG: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION_FAILURE:   (status.HTTP_400_BAD_REQUEST, "Validation failed"),
    ErrorKind.DUPLICATE_EMAIL:      (status.HTTP_400_BAD_REQUEST, "User already exists with this email"),
    ErrorKind.INVALID_CREDENTIALS:  (status.HTTP_401_UNAUTHORIZED, "Invalid email or password"),
    ErrorKind.INVALID_TOKEN:        (status.HTTP_400_BAD_REQUEST, "Invalid or expired token"),
    ErrorKind.MISSING_TOKEN:        (status.HTTP_401_UNAUTHORIZED, "No token provided"),
    ErrorKind.UNAUTHENTICATED:      (status.HTTP_401_UNAUTHORIZED, "Authentication failed"),
    ErrorKind.FORBIDDEN:            (status.HTTP_403_FORBIDDEN, "Insufficient permissions"),
    ErrorKind.NOT_FOUND:            (status.HTTP_404_NOT_FOUND, "Resource not found"),
    ErrorKind.RATE_LIMITED:         (status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests, please try again later"),
    ErrorKind.NOTIFICATION_FAILURE: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send email"),
    ErrorKind.INTERNAL:             (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


class AppError(Exception):
    """A domain failure with a stable kind, an optional message override
    and, for validation failures, a list of ``{field, message}`` pairs."""

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        errors: Optional[list[dict[str, str]]] = None,
    ):
        self.kind = kind
        self.message = message or _CATALOG[kind][1]
        self.errors = errors
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return _CATALOG[self.kind][0]

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_body())


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{field, message}`` pairs.  The leading
    ``body`` / ``query`` location segment is dropped."""
    result = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        result.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return result


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.kind.value, request.method, request.url.path, exc.message)
    return exc.to_response()


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return AppError(ErrorKind.VALIDATION_FAILURE, errors=_field_errors(exc)).to_response()


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    # Full traceback goes to the log only – the client gets a generic body
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return AppError(ErrorKind.INTERNAL).to_response()


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(Exception, _handle_unexpected)
