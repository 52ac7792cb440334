"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UserOut,
)
from app.schemas.health import HealthResponse
from app.schemas.pollution import (
    PollutionCreate,
    PollutionOut,
    PollutionType,
    PollutionUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PollutionCreate",
    "PollutionOut",
    "PollutionType",
    "PollutionUpdate",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenPairResponse",
    "UserOut",
]
