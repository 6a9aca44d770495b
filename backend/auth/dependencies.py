# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI dependency guards and service wiring.

Protected routes compose two checks:

1. :func:`authenticate` – bearer token → verified identity, attached to
   ``request.state.identity``.  Any failure is a 401 and the route body
   never runs.
2. :func:`require_roles` – the attached identity's role must be in the
   allowed set, otherwise 403.

``require_admin`` and ``require_user`` are the two canonical policies.
"""

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from auth.service import AuthService
from auth.store import UserStore
from core.errors import AppError, ErrorKind
from core.tokens import TokenClaims
from database import get_db
from models.user import Role


def authenticate(request: Request) -> TokenClaims:
    tokens = request.app.state.token_service
    try:
        token = tokens.extract_bearer(request.headers.get("Authorization"))
        identity = tokens.verify(token)
    except AppError as exc:
        raise AppError(ErrorKind.UNAUTHENTICATED, f"Authentication failed: {exc.message}") from None
    request.state.identity = identity
    return identity


def require_roles(*roles: Role):
    allowed = frozenset(role.value for role in roles)

    def _guard(identity: TokenClaims = Depends(authenticate)) -> TokenClaims:
        if identity.role not in allowed:
            raise AppError(ErrorKind.FORBIDDEN)
        return identity

    return _guard


require_admin = require_roles(Role.ADMIN)
require_user = require_roles(Role.USER, Role.ADMIN)


def get_auth_service(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> AuthService:
    state = request.app.state
    return AuthService(
        store=UserStore(db),
        tokens=state.token_service,
        hasher=state.password_hasher,
        notifier=state.notifier,
        dispatch=background_tasks.add_task,
    )
