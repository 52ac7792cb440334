"""User accounts: creation with unique login, and credential checks."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import User
from app.models.user import ROLE_USER
from app.schemas.auth import RegisterRequest

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class DuplicateLoginError(Exception):
    """Raised when the requested login is already taken."""

    def __init__(self, login: str) -> None:
        self.login = login
        super().__init__(f"User with login {login!r} already exists")


def create_account(db: Session, body: RegisterRequest, settings: "Settings") -> User:
    """
    Persist a new user with a hashed password. Commits on success.

    Raises DuplicateLoginError if the login exists (checked up front and again via the
    unique index, in case two registrations race).
    """
    if db.query(User.id).filter(User.login == body.login).first() is not None:
        raise DuplicateLoginError(body.login)

    user = User(
        login=body.login,
        password_hash=hash_password(body.password, rounds=settings.BCRYPT_ROUNDS),
        nom=body.nom,
        prenom=body.prenom,
        role=body.role or ROLE_USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateLoginError(body.login) from e
    db.refresh(user)
    logger.info("Created user id=%s login=%s role=%s", user.id, user.login, user.role)
    return user


def authenticate(db: Session, login: str, password: str) -> User | None:
    """Return the user for login/password, or None. Same result for unknown login and bad password."""
    user = db.query(User).filter(User.login == login).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for login=%s", login)
        return None
    return user
