"""Unit tests for app.core.security: password hashing, token issuance and verification."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta

import jwt

from app.core.ids import uuid7
from app.core.security import (
    TokenConfigurationError,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    ensure_token_secrets,
    hash_password,
    issue_token_pair,
    verify_password,
)
from support import ACCESS_SECRET, make_settings

USER_ID = "0190f5a2-7c1e-7b3a-9a51-0c2d4e6f8a10"


class TestPasswordHashing(unittest.TestCase):
    def test_hash_verifies_and_is_not_plaintext(self) -> None:
        hashed = hash_password("s3cret-password", rounds=4)
        self.assertNotEqual(hashed, "s3cret-password")
        self.assertTrue(verify_password("s3cret-password", hashed))
        self.assertFalse(verify_password("wrong-password", hashed))

    def test_missing_or_garbage_hash_is_rejected(self) -> None:
        self.assertFalse(verify_password("anything", None))
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestTokenIssuance(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()

    def test_access_token_claims(self) -> None:
        token = create_access_token(self.settings, USER_ID, "alice", "admin")
        payload = decode_access_token(self.settings, token)
        self.assertEqual(payload["id"], USER_ID)
        self.assertEqual(payload["login"], "alice")
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(payload["exp"] - payload["iat"], 15 * 60)

    def test_refresh_token_claims_and_lifetime(self) -> None:
        token = create_refresh_token(self.settings, USER_ID, "alice")
        payload = decode_refresh_token(self.settings, token)
        self.assertEqual(payload["id"], USER_ID)
        self.assertEqual(payload["login"], "alice")
        self.assertNotIn("role", payload)
        self.assertEqual(payload["exp"] - payload["iat"], 7 * 24 * 3600)

    def test_secrets_are_distinct(self) -> None:
        pair = issue_token_pair(self.settings, USER_ID, "alice", "user")
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(self.settings, pair.refresh_token)
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_refresh_token(self.settings, pair.access_token)

    def test_refresh_tokens_issued_together_differ(self) -> None:
        now = datetime.now(UTC)
        first = create_refresh_token(self.settings, USER_ID, "alice", now=now)
        second = create_refresh_token(self.settings, USER_ID, "alice", now=now)
        self.assertNotEqual(first, second)


class TestTokenVerification(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()

    def test_expired_after_fifteen_minutes(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=15, seconds=1)
        token = create_access_token(self.settings, USER_ID, "alice", "user", now=issued)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(self.settings, token)

    def test_accepted_just_before_expiry(self) -> None:
        issued = datetime.now(UTC) - timedelta(minutes=14, seconds=50)
        token = create_access_token(self.settings, USER_ID, "alice", "user", now=issued)
        self.assertEqual(decode_access_token(self.settings, token)["login"], "alice")

    def test_not_yet_valid_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "id": USER_ID,
                "login": "alice",
                "role": "user",
                "iat": now,
                "nbf": now + timedelta(minutes=5),
                "exp": now + timedelta(minutes=15),
            },
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(jwt.ImmatureSignatureError):
            decode_access_token(self.settings, token)

    def test_other_algorithms_are_rejected(self) -> None:
        now = datetime.now(UTC)
        claims = {"id": USER_ID, "login": "alice", "role": "admin", "iat": now,
                  "exp": now + timedelta(minutes=15)}
        unsigned = jwt.encode(claims, key="", algorithm="none")
        hs512 = jwt.encode(claims, ACCESS_SECRET, algorithm="HS512")
        for token in (unsigned, hs512):
            with self.assertRaises(jwt.PyJWTError):
                decode_access_token(self.settings, token)

    def test_tampered_token_is_rejected(self) -> None:
        token = create_access_token(self.settings, USER_ID, "alice", "user")
        header, payload, signature = token.split(".")
        swapped = "A" if payload[5] != "A" else "B"
        tampered = ".".join([header, payload[:5] + swapped + payload[6:], signature])
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(self.settings, tampered)

    def test_missing_identity_claims_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"role": "admin", "iat": now, "exp": now + timedelta(minutes=15)},
            ACCESS_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(jwt.InvalidTokenError):
            decode_access_token(self.settings, token)


class TestMissingSecrets(unittest.TestCase):
    def test_access_secret_required(self) -> None:
        settings = make_settings(ACCESS_TOKEN_SECRET=None)
        with self.assertRaises(TokenConfigurationError):
            create_access_token(settings, USER_ID, "alice", "user")
        with self.assertRaises(TokenConfigurationError):
            ensure_token_secrets(settings)

    def test_refresh_secret_required(self) -> None:
        settings = make_settings(REFRESH_TOKEN_SECRET=None)
        with self.assertRaises(TokenConfigurationError):
            create_refresh_token(settings, USER_ID, "alice")

    def test_blank_secret_counts_as_unset(self) -> None:
        settings = make_settings(REFRESH_TOKEN_SECRET="   ")
        self.assertIsNone(settings.REFRESH_TOKEN_SECRET)
        with self.assertRaises(TokenConfigurationError):
            decode_refresh_token(settings, "irrelevant")


class TestUuid7(unittest.TestCase):
    def test_version_and_variant(self) -> None:
        value = uuid7()
        self.assertEqual(value.version, 7)
        self.assertEqual(value.variant, uuid.RFC_4122)

    def test_time_ordered_across_milliseconds(self) -> None:
        first = uuid7()
        later = None
        # Spin until the millisecond timestamp advances.
        while later is None or (later.int >> 80) == (first.int >> 80):
            later = uuid7()
        self.assertLess(str(first), str(later))


if __name__ == "__main__":
    unittest.main()
