"""Unit tests for app.core.tokens: issuing, validating and key rotation."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import jwt
from pydantic import SecretStr

from app.core.tokens import (
    INVALID_TOKEN_MESSAGE,
    InvalidTokenError,
    TokenGenerationError,
    TokenIssuer,
    build_token_issuer,
)

SECRET = "test-secret-0123456789abcdef-0123456789"
OTHER_SECRET = "another-secret-0123456789abcdef-012345"


class TestIssueAndValidate(unittest.TestCase):
    """Freshly issued tokens validate and carry the user id."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET)

    def test_access_token_round_trip(self) -> None:
        token, expires_at = self.issuer.issue_access_token(42)
        claims = self.issuer.validate(token)
        self.assertEqual(claims.user_id, 42)
        self.assertEqual(int(claims.expires_at.timestamp()), expires_at)
        self.assertIsNone(claims.key_id)

    def test_access_token_lifetime_is_15_minutes(self) -> None:
        before = datetime.now(UTC)
        token, expires_at = self.issuer.issue_access_token(1)
        claims = self.issuer.validate(token)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(minutes=15))
        expected = (before + timedelta(minutes=15)).timestamp()
        self.assertAlmostEqual(expires_at, expected, delta=5)

    def test_refresh_token_lifetime_is_7_days(self) -> None:
        claims = self.issuer.validate(self.issuer.issue_refresh_token(7))
        self.assertEqual(claims.user_id, 7)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(days=7))

    def test_payload_uses_user_id_claim(self) -> None:
        token, _ = self.issuer.issue_access_token(5)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        self.assertEqual(payload["user_id"], 5)
        self.assertIn("exp", payload)


class TestValidateRejects(unittest.TestCase):
    """Every failure is an InvalidTokenError with the same public message."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET)

    def assertInvalid(self, token: str, reason: str) -> None:
        with self.assertRaises(InvalidTokenError) as ctx:
            self.issuer.validate(token)
        self.assertEqual(ctx.exception.message, INVALID_TOKEN_MESSAGE)
        self.assertEqual(ctx.exception.reason, reason)

    def test_expired_token(self) -> None:
        past = TokenIssuer(SECRET, clock=lambda: datetime.now(UTC) - timedelta(days=1))
        token, _ = past.issue_access_token(1)
        self.assertInvalid(token, "expired")

    def test_expired_refresh_token(self) -> None:
        past = TokenIssuer(SECRET, clock=lambda: datetime.now(UTC) - timedelta(days=8))
        self.assertInvalid(past.issue_refresh_token(1), "expired")

    def test_signed_with_other_secret(self) -> None:
        token, _ = TokenIssuer(OTHER_SECRET).issue_access_token(1)
        self.assertInvalid(token, "signature")

    def test_garbage(self) -> None:
        self.assertInvalid("not.a.jwt", "malformed")

    def test_empty_string(self) -> None:
        self.assertInvalid("", "malformed")

    def test_missing_user_id(self) -> None:
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(minutes=5)}, SECRET, algorithm="HS256"
        )
        self.assertInvalid(token, "malformed")

    def test_missing_exp(self) -> None:
        token = jwt.encode({"user_id": 1}, SECRET, algorithm="HS256")
        self.assertInvalid(token, "malformed")

    def test_non_integer_user_id(self) -> None:
        token = jwt.encode(
            {"user_id": "1", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        self.assertInvalid(token, "malformed")

    def test_other_algorithm_rejected(self) -> None:
        token = jwt.encode(
            {"user_id": 1, "exp": datetime.now(UTC) + timedelta(minutes=5)},
            SECRET,
            algorithm="HS512",
        )
        self.assertInvalid(token, "malformed")


class TestKeyRotation(unittest.TestCase):
    """Tokens carry a kid; retired keys stay verifiable when configured."""

    def test_kid_written_to_header(self) -> None:
        token, _ = TokenIssuer(SECRET, key_id="v1").issue_access_token(1)
        self.assertEqual(jwt.get_unverified_header(token)["kid"], "v1")

    def test_retired_key_still_validates(self) -> None:
        old_token, _ = TokenIssuer(OTHER_SECRET, key_id="v1").issue_access_token(9)
        current = TokenIssuer(SECRET, key_id="v2", verification_keys={"v1": OTHER_SECRET})
        claims = current.validate(old_token)
        self.assertEqual(claims.user_id, 9)
        self.assertEqual(claims.key_id, "v1")

    def test_unknown_kid_rejected(self) -> None:
        token, _ = TokenIssuer(OTHER_SECRET, key_id="v9").issue_access_token(1)
        current = TokenIssuer(SECRET, key_id="v2")
        with self.assertRaises(InvalidTokenError) as ctx:
            current.validate(token)
        self.assertEqual(ctx.exception.reason, "signature")

    def test_kid_pointing_at_wrong_secret_rejected(self) -> None:
        token, _ = TokenIssuer(OTHER_SECRET, key_id="v2").issue_access_token(1)
        with self.assertRaises(InvalidTokenError):
            TokenIssuer(SECRET, key_id="v2").validate(token)


class TestTokenGeneration(unittest.TestCase):
    def test_unsupported_algorithm_raises_generation_error(self) -> None:
        issuer = TokenIssuer(SECRET, algorithm="XX999")
        with self.assertRaises(TokenGenerationError):
            issuer.issue_access_token(1)
        with self.assertRaises(TokenGenerationError):
            issuer.issue_refresh_token(1)


class TestBuildTokenIssuer(unittest.TestCase):
    """build_token_issuer reads lifetimes and keys from settings."""

    def test_uses_settings(self) -> None:
        settings = MagicMock()
        settings.JWT_SECRET = SecretStr(SECRET)
        settings.JWT_ALGORITHM = "HS256"
        settings.JWT_KEY_ID = "v2"
        settings.JWT_VERIFICATION_KEYS = {"v1": SecretStr(OTHER_SECRET)}
        settings.ACCESS_TOKEN_EXPIRE_MINUTES = 5
        settings.REFRESH_TOKEN_EXPIRE_DAYS = 1

        issuer = build_token_issuer(settings)
        self.assertEqual(issuer.access_ttl, timedelta(minutes=5))
        self.assertEqual(issuer.refresh_ttl, timedelta(days=1))

        token, _ = issuer.issue_access_token(3)
        self.assertEqual(issuer.validate(token).key_id, "v2")
        old_token, _ = TokenIssuer(OTHER_SECRET, key_id="v1").issue_access_token(3)
        self.assertEqual(issuer.validate(old_token).user_id, 3)


if __name__ == "__main__":
    unittest.main()
