"""Auth endpoints (register, login, refresh, logout, me) and auth dependencies."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import DbDep, SettingsDep
from app.core.security import decode_access_token
from app.models import User
from app.models.user import ROLE_ADMIN
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
from app.services.accounts import DuplicateLoginError, authenticate, create_account
from app.services.sessions import (
    InvalidRefreshTokenError,
    end_session,
    refresh_session,
    start_session,
)

router = APIRouter()

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_BEARER_CHALLENGE,
    )


def get_current_user(request: Request, settings: SettingsDep) -> CurrentUser:
    """
    Dependency: require `Authorization: Bearer <token>` with a valid access token.

    Verification is stateless (signature, expiry, claims); the user table is not consulted,
    so a token stays usable until it expires even after logout.
    """
    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized("No token provided")
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise _unauthorized("Invalid token format. Expected 'Bearer <token>'")
    try:
        payload = decode_access_token(settings, parts[1])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except jwt.PyJWTError:
        raise _unauthorized("Invalid token")
    return CurrentUser(
        id=str(payload["id"]),
        login=str(payload["login"]),
        role=str(payload.get("role") or "user"),
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require the token's role claim to be 'admin'. Raises 403 otherwise."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: admin",
        )
    return current_user


def _auth_response(user: User, access_token: str, refresh_token: str) -> AuthResponse:
    return AuthResponse(
        user=UserOut.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: DbDep, settings: SettingsDep) -> AuthResponse:
    """Create an account and open a session for it."""
    try:
        user = create_account(db, body, settings)
    except DuplicateLoginError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this login already exists",
        )
    pair = start_session(db, user, settings)
    return _auth_response(user, pair.access_token, pair.refresh_token)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: DbDep, settings: SettingsDep) -> AuthResponse:
    """
    Authenticate with login and password; returns the user and a token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    user = authenticate(db, body.login, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    pair = start_session(db, user, settings)
    return _auth_response(user, pair.access_token, pair.refresh_token)


@router.post("/refresh", response_model=TokenPairResponse)
def refresh(
    db: DbDep,
    settings: SettingsDep,
    body: RefreshTokenRequest | None = None,
) -> TokenPairResponse:
    """Exchange a live refresh token for a new pair; the presented token stops working."""
    token = body.refresh_token if body else None
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token is required",
        )
    try:
        pair = refresh_session(db, token, settings)
    except InvalidRefreshTokenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(db: DbDep, body: RefreshTokenRequest | None = None) -> MessageResponse:
    """Revoke the refresh token. Succeeds whether or not the token was still live."""
    token = body.refresh_token if body else None
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Refresh token is required",
        )
    end_session(db, token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserOut)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: DbDep,
) -> UserOut:
    """Return the authenticated user's profile (no password hash or refresh token)."""
    user = db.get(User, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut.model_validate(user)
