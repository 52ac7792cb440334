"""Session lifecycle against a real (in-memory SQLite) store: start, rotate, revoke."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from sqlalchemy import update

from app.core.database import build_engine, build_session_factory
from app.core.security import create_refresh_token, decode_access_token
from app.models import Base, User
from app.services import sessions
from app.services.sessions import (
    InvalidRefreshTokenError,
    end_session,
    refresh_session,
    start_session,
)
from support import make_settings


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()
        engine = build_engine(self.settings)
        Base.metadata.create_all(engine)
        self.db = build_session_factory(engine)()
        self.user = User(login="alice", password_hash="x", nom="Martin", prenom="Alice", role="user")
        self.db.add(self.user)
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()

    def stored_token(self) -> str | None:
        self.db.expire_all()
        return self.db.get(User, self.user.id).refresh_token


class TestStartSession(SessionTestCase):
    def test_persists_refresh_token(self) -> None:
        pair = start_session(self.db, self.user, self.settings)
        self.assertEqual(self.stored_token(), pair.refresh_token)
        claims = decode_access_token(self.settings, pair.access_token)
        self.assertEqual(claims["id"], self.user.id)
        self.assertEqual(claims["role"], "user")

    def test_new_login_supersedes_previous_token(self) -> None:
        first = start_session(self.db, self.user, self.settings)
        second = start_session(self.db, self.user, self.settings)
        self.assertEqual(self.stored_token(), second.refresh_token)
        with self.assertRaises(InvalidRefreshTokenError):
            refresh_session(self.db, first.refresh_token, self.settings)


class TestRefreshSession(SessionTestCase):
    def test_rotates_and_rejects_superseded_token(self) -> None:
        original = start_session(self.db, self.user, self.settings)
        rotated = refresh_session(self.db, original.refresh_token, self.settings)
        self.assertNotEqual(rotated.refresh_token, original.refresh_token)
        self.assertEqual(self.stored_token(), rotated.refresh_token)

        with self.assertRaises(InvalidRefreshTokenError) as ctx:
            refresh_session(self.db, original.refresh_token, self.settings)
        self.assertEqual(ctx.exception.message, "Invalid refresh token")
        # The failed attempt does not disturb the live token.
        self.assertEqual(self.stored_token(), rotated.refresh_token)

    def test_expired_token_is_rejected(self) -> None:
        issued = datetime.now(UTC) - timedelta(days=8)
        expired = create_refresh_token(self.settings, self.user.id, "alice", now=issued)
        self.user.refresh_token = expired
        self.db.commit()
        with self.assertRaises(InvalidRefreshTokenError) as ctx:
            refresh_session(self.db, expired, self.settings)
        self.assertEqual(ctx.exception.message, "Invalid or expired refresh token")

    def test_garbage_token_is_rejected(self) -> None:
        with self.assertRaises(InvalidRefreshTokenError):
            refresh_session(self.db, "not-a-jwt", self.settings)

    def test_concurrent_rotation_loses(self) -> None:
        pair = start_session(self.db, self.user, self.settings)
        real_issue = sessions.issue_token_pair

        def issue_after_competing_refresh(*args, **kwargs):
            # Another request rotates the same token between lookup and write.
            self.db.execute(
                update(User)
                .where(User.id == self.user.id)
                .values(refresh_token="rotated-elsewhere")
            )
            return real_issue(*args, **kwargs)

        with patch.object(sessions, "issue_token_pair", side_effect=issue_after_competing_refresh):
            with self.assertRaises(InvalidRefreshTokenError):
                refresh_session(self.db, pair.refresh_token, self.settings)


class TestEndSession(SessionTestCase):
    def test_clears_token_and_blocks_refresh(self) -> None:
        pair = start_session(self.db, self.user, self.settings)
        self.assertTrue(end_session(self.db, pair.refresh_token))
        self.assertIsNone(self.stored_token())
        with self.assertRaises(InvalidRefreshTokenError):
            refresh_session(self.db, pair.refresh_token, self.settings)

    def test_unknown_token_is_a_no_op(self) -> None:
        pair = start_session(self.db, self.user, self.settings)
        self.assertFalse(end_session(self.db, "unknown"))
        self.assertEqual(self.stored_token(), pair.refresh_token)


if __name__ == "__main__":
    unittest.main()
