"""User administration: list users (authenticated) and create users (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.auth import get_current_user, require_admin
from app.api.deps import DbDep, SettingsDep
from app.models import User
from app.schemas.auth import CurrentUser, RegisterRequest, UserOut
from app.services.accounts import DuplicateLoginError, create_account

router = APIRouter()


@router.get("", response_model=list[UserOut])
def list_users(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: DbDep,
) -> list[UserOut]:
    """List all users without password hashes or refresh tokens."""
    users = db.query(User).order_by(User.id).all()
    return [UserOut.model_validate(u) for u in users]


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: RegisterRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: DbDep,
    settings: SettingsDep,
) -> UserOut:
    """Create a user with any role (admin only). No session is opened for the new user."""
    try:
        user = create_account(db, body, settings)
    except DuplicateLoginError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this login already exists",
        )
    return UserOut.model_validate(user)
