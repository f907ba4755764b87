"""Tests for token issuing and verification."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from taskdesk.config import Settings, parse_duration
from taskdesk.models.base import utcnow
from taskdesk.services.auth import (
    TokenExpiredError,
    TokenInvalidError,
    issue_token,
    verify_token,
)


class TestIssueToken:
    """Tests for issue_token."""

    def test_token_carries_subject(self, settings: Settings):
        """The token's subject is the user ID."""
        user_id = uuid4()
        token, _ = issue_token(user_id, settings)

        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == str(user_id)

    def test_default_lifetime_is_seven_days(self, settings: Settings):
        """Tokens expire seven days after issue by default."""
        now = utcnow()
        _, expires_at = issue_token(uuid4(), settings, now=now)
        assert expires_at - now == timedelta(days=7)

    def test_lifetime_is_configurable(self):
        """JWT_EXPIRES_IN controls the lifetime."""
        settings = Settings(JWT_SECRET="s", JWT_EXPIRES_IN=timedelta(hours=2))
        now = utcnow()
        _, expires_at = issue_token(uuid4(), settings, now=now)
        assert expires_at - now == timedelta(hours=2)


class TestVerifyToken:
    """Tests for verify_token."""

    def test_round_trip_resolves_same_user(self, settings: Settings):
        """A token resolves to exactly the user it was issued for."""
        user_a, user_b = uuid4(), uuid4()
        token_a, _ = issue_token(user_a, settings)

        resolved = verify_token(token_a, settings)
        assert resolved == user_a
        assert resolved != user_b

    def test_expired_token(self, settings: Settings):
        """A token past its expiry raises TokenExpiredError."""
        token, _ = issue_token(uuid4(), settings, now=utcnow() - timedelta(days=8))
        with pytest.raises(TokenExpiredError):
            verify_token(token, settings)

    def test_tampered_payload(self, settings: Settings):
        """Swapping in another payload breaks the signature."""
        token, _ = issue_token(uuid4(), settings)
        header, _, signature = token.split(".")
        forged_token, _ = issue_token(uuid4(), settings)
        forged_payload = forged_token.split(".")[1]

        with pytest.raises(TokenInvalidError):
            verify_token(f"{header}.{forged_payload}.{signature}", settings)

    def test_tampered_signature(self, settings: Settings):
        """Altering the signature fails verification."""
        token, _ = issue_token(uuid4(), settings)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

        with pytest.raises(TokenInvalidError):
            verify_token(f"{header}.{payload}.{flipped}", settings)

    def test_other_signing_key(self, settings: Settings):
        """Rotating the secret invalidates existing tokens."""
        token, _ = issue_token(uuid4(), settings)
        rotated = Settings(JWT_SECRET="another-secret")

        with pytest.raises(TokenInvalidError):
            verify_token(token, rotated)

    def test_garbage_token(self, settings: Settings):
        """A string that is not a JWT is invalid."""
        with pytest.raises(TokenInvalidError):
            verify_token("not-a-token", settings)

    def test_subject_must_be_user_id(self, settings: Settings):
        """A correctly signed token with a non-UUID subject is invalid."""
        token = jwt.encode(
            {"sub": "admin", "exp": utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(TokenInvalidError):
            verify_token(token, settings)

    def test_missing_subject(self, settings: Settings):
        """A correctly signed token without a subject is invalid."""
        token = jwt.encode(
            {"exp": utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        with pytest.raises(TokenInvalidError):
            verify_token(token, settings)


class TestParseDuration:
    """Tests for the JWT_EXPIRES_IN format."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("30m", timedelta(minutes=30)),
            ("45s", timedelta(seconds=45)),
            ("3600", timedelta(seconds=3600)),
            (" 2D ", timedelta(days=2)),
        ],
    )
    def test_valid_durations(self, raw, expected):
        assert parse_duration(raw) == expected

    @pytest.mark.parametrize("raw", ["", "d7", "7w", "-1d", "seven days"])
    def test_invalid_durations(self, raw):
        with pytest.raises(ValueError):
            parse_duration(raw)
