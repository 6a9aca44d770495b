# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – register, login, password reset, current-user profile.

The handlers only translate HTTP to :class:`auth.service.AuthService`
calls; every rule lives in the service.
"""

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_auth_service, require_user
from auth.schemas import (
    AuthData,
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileData,
    RegisterRequest,
    UpdateProfileRequest,
    UserInfo,
)
from auth.service import AuthService
from core.schemas import ApiResponse, MessageResponse
from core.tokens import TokenClaims

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(result) -> AuthData:
    return AuthData(user=UserInfo.model_validate(result.user), token=result.token)


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Create an account and return it with a session token."""
    result = service.register(body.name, body.email, body.password, body.role)
    return ApiResponse[AuthData](message="User registered successfully", data=_auth_payload(result))


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=ApiResponse[AuthData])
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Authenticate and return a signed session token."""
    result = service.login(body.email, body.password)
    return ApiResponse[AuthData](message="Login successful", data=_auth_payload(result))


# ---------------------------------------------------------------------------
# POST /auth/password-reset/request
# ---------------------------------------------------------------------------


@router.post("/password-reset/request", response_model=MessageResponse)
def request_password_reset(body: PasswordResetRequest, service: AuthService = Depends(get_auth_service)):
    return MessageResponse(message=service.request_password_reset(body.email))


# ---------------------------------------------------------------------------
# POST /auth/password-reset/confirm
# ---------------------------------------------------------------------------


@router.post("/password-reset/confirm", response_model=MessageResponse)
def confirm_password_reset(body: PasswordResetConfirm, service: AuthService = Depends(get_auth_service)):
    service.confirm_password_reset(body.token, body.password)
    return MessageResponse(message="Password reset successful")


# ---------------------------------------------------------------------------
# GET / PUT /auth/profile
# ---------------------------------------------------------------------------


@router.get("/profile", response_model=ApiResponse[ProfileData])
def get_profile(
    identity: TokenClaims = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
):
    """Return the authenticated user's public profile (no secrets)."""
    user = service.get_profile(identity)
    return ApiResponse[ProfileData](data=ProfileData(user=UserInfo.model_validate(user)))


@router.put("/profile", response_model=ApiResponse[ProfileData])
def update_profile(
    body: UpdateProfileRequest,
    identity: TokenClaims = Depends(require_user),
    service: AuthService = Depends(get_auth_service),
):
    """Change the display name.  Email and role cannot be changed here."""
    user = service.update_profile(identity, body.name)
    return ApiResponse[ProfileData](
        message="Profile updated successfully",
        data=ProfileData(user=UserInfo.model_validate(user)),
    )
