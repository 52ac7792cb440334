"""Request/response schemas for auth and user endpoints."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.core.security import (
    LOGIN_MAX_LEN,
    LOGIN_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)

Role = Literal["user", "admin"]


def _strip_required(value: str) -> str:
    """Trim surrounding whitespace; reject values that are blank once trimmed."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped


class RegisterRequest(BaseModel):
    """Account creation payload (public registration and admin user creation)."""

    login: str = Field(..., min_length=LOGIN_MIN_LEN, max_length=LOGIN_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    nom: str = Field(..., min_length=1, max_length=255, description="Family name")
    prenom: str = Field(..., min_length=1, max_length=255, description="Given name")
    role: Role | None = Field(default=None, description="Defaults to 'user'")

    @field_validator("login", "nom", "prenom")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return _strip_required(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    login: str = Field(..., min_length=1, max_length=LOGIN_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class RefreshTokenRequest(BaseModel):
    """
    Body of /refresh and /logout. The token is optional at the schema level so each
    endpoint can answer a missing token with its own status code.
    """

    model_config = {"populate_by_name": True}

    refresh_token: str | None = Field(default=None, alias="refreshToken")


class UserOut(BaseModel):
    """Public view of a user: never includes the password hash or refresh token."""

    model_config = {"from_attributes": True}

    id: str
    login: str
    nom: str
    prenom: str | None = None
    role: str


class TokenPairResponse(BaseModel):
    """Fresh access/refresh pair returned by /refresh."""

    model_config = {"populate_by_name": True}

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class AuthResponse(TokenPairResponse):
    """Returned by /register and /login: the user plus a token pair."""

    user: UserOut


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    """Identity claims of the verified access token (id, login, role)."""

    id: str
    login: str
    role: str
