# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field


def _check_email(value: str) -> str:
    # Format check only: the address is stored and matched exactly as typed
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"Invalid email format: {exc}") from None
    return value


Email = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]


# -- Requests --------------------------------------------------------------


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: Email
    password: str = Field(min_length=6, max_length=128)
    role: Literal["ADMIN", "USER"] = "USER"


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(min_length=1, max_length=128)


class PasswordResetRequest(BaseModel):
    email: Email


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=128)


class UpdateProfileRequest(BaseModel):
    # Only the display name is mutable here; email and role are not accepted
    name: str = Field(min_length=2, max_length=255)


# -- Responses -------------------------------------------------------------


class UserInfo(BaseModel):
    """Public profile – never carries the password hash."""

    id: str
    name: str
    email: str
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthData(BaseModel):
    user: UserInfo
    token: str


class ProfileData(BaseModel):
    user: UserInfo
