"""
Session lifecycle on top of the token pair: start, refresh (with rotation), end.

Access tokens are verified statelessly; the refresh token is the stateful half.
Exactly one refresh token is live per user (users.refresh_token). Refreshing
replaces it, logging out clears it, and a token that no longer matches the
stored value is rejected even when its signature and expiry are still valid.
"""

import logging
from typing import TYPE_CHECKING

import jwt
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.security import TokenPair, decode_refresh_token, issue_token_pair
from app.models import User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class InvalidRefreshTokenError(Exception):
    """Refresh token is invalid, expired, superseded or revoked."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def start_session(db: Session, user: User, settings: "Settings") -> TokenPair:
    """Issue a pair for user and persist its refresh token, replacing any previous one."""
    pair = issue_token_pair(settings, user.id, user.login, user.role)
    user.refresh_token = pair.refresh_token
    db.commit()
    return pair


def refresh_session(db: Session, refresh_token: str, settings: "Settings") -> TokenPair:
    """
    Exchange a live refresh token for a new pair and rotate the stored token.

    The rotation is a single conditional UPDATE keyed on the presented token, so of
    two concurrent refreshes with the same token at most one can win.
    """
    try:
        claims = decode_refresh_token(settings, refresh_token)
    except jwt.PyJWTError as e:
        logger.info("Refresh rejected: %s", e)
        raise InvalidRefreshTokenError("Invalid or expired refresh token") from e

    user = (
        db.query(User)
        .filter(User.id == claims["id"], User.refresh_token == refresh_token)
        .first()
    )
    if user is None:
        logger.info("Refresh rejected: no stored token match for user id=%s", claims["id"])
        raise InvalidRefreshTokenError("Invalid refresh token")

    pair = issue_token_pair(settings, user.id, user.login, user.role)
    result = db.execute(
        update(User)
        .where(User.id == user.id, User.refresh_token == refresh_token)
        .values(refresh_token=pair.refresh_token)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.info("Refresh rejected: token for user id=%s rotated concurrently", user.id)
        raise InvalidRefreshTokenError("Invalid refresh token")
    db.commit()
    return pair


def end_session(db: Session, refresh_token: str) -> bool:
    """Clear the stored refresh token matching refresh_token. Returns whether a session was ended."""
    user = db.query(User).filter(User.refresh_token == refresh_token).first()
    if user is None:
        return False
    user.refresh_token = None
    db.commit()
    logger.info("Session ended for user id=%s", user.id)
    return True
