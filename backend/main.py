# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build every shared component once – settings, DB engine/session factory,
  token service, password hasher, mailer/notifier, rate limiter – and keep
  them on ``app.state`` so request dependencies receive them explicitly.
* Register CORS, rate-limit and request-logging middleware.
* Register the central error handlers.
* Mount the feature routers (auth, records, reports).
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:create_app --factory
"""

import time
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy.orm import sessionmaker
from starlette.middleware.base import BaseHTTPMiddleware

from auth.notifications import Notifier
from auth.router import router as auth_router
from core.config import Settings
from core.errors import register_error_handlers
from core.logger import logger
from core.mailer import Mailer, build_mailer
from core.rate_limit import InMemoryRateLimiter, RateLimitMiddleware, get_client_ip, parse_trusted_proxies
from core.security import PasswordHasher
from core.tokens import TokenService
from database import build_engine, build_session_factory
from records.router import router as records_router
from reports.router import router as reports_router


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Request bodies (passwords, reset tokens) are NOT echoed – only the URL and
# metadata are recorded.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request, request.app.state.trusted_proxies),
            response.status_code,
            elapsed_ms,
        )
        return response


def create_app(
    settings: Optional[Settings] = None,
    *,
    session_factory: Optional[sessionmaker] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    """
    Build the application.  Tests pass their own session factory (in-memory
    SQLite) and mailer; production builds both from *settings*.
    """
    settings = settings or Settings()

    app = FastAPI(title="Dairy Farm Management", version="1.0.0")

    # -- shared components ---------------------------------------------------
    if session_factory is None:
        session_factory = build_session_factory(build_engine(settings.database_url))

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.token_service = TokenService(
        settings.secret_key,
        session_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        reset_ttl=timedelta(minutes=settings.reset_token_expire_minutes),
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.password_hash_rounds)
    app.state.trusted_proxies = parse_trusted_proxies(settings.trusted_proxies)
    app.state.notifier = Notifier(
        mailer or build_mailer(settings),
        frontend_url=settings.frontend_url,
        reset_ttl_minutes=settings.reset_token_expire_minutes,
        attempts=settings.mail_retry_attempts,
        backoff_seconds=settings.mail_retry_backoff_seconds,
    )

    # -- middleware (last added runs first) -----------------------------------
    if settings.rate_limit_max_requests > 0:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=InMemoryRateLimiter(
                settings.rate_limit_max_requests,
                settings.rate_limit_window_ms / 1000,
            ),
            trusted_proxies=app.state.trusted_proxies,
        )
    app.add_middleware(_RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    register_error_handlers(app)

    # -- routers --------------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(records_router)
    app.include_router(reports_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info("Dairy Farm Management app created")
    return app
