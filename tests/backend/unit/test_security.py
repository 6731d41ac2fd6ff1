"""
Unit tests for core.security module.
Tests password hashing and session token issuance/verification.
"""
import pytest
import datetime as dt
import jwt

from app.core.security import (
    InvalidTokenError,
    TokenService,
    hash_password,
    verify_password,
    pwd_context,
    token_service,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)

    def test_hash_password_is_bcrypt_cost_10(self):
        hashed = hash_password("TestPassword123")
        assert hashed.startswith("$2")
        assert hashed.split("$")[2] == "10"
        assert pwd_context.identify(hashed) == "bcrypt"

    def test_verify_password_correct_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_rejects_garbage_hash(self):
        """A malformed stored hash is a failed check, not a crash."""
        assert verify_password("anything", "not-a-hash") is False
        assert verify_password("anything", "") is False


class TestTokenService:
    """Tests for session token creation and validation."""

    def test_issue_and_verify_round_trip(self):
        service = TokenService(secret="unit-secret")
        token = service.issue("user-123")
        assert isinstance(token, str)
        assert service.verify(token) == "user-123"

    def test_payload_carries_id_and_subject(self):
        service = TokenService(secret="unit-secret")
        payload = service.decode(service.issue("user-456"))
        assert payload["id"] == "user-456"
        assert payload["sub"] == "user-456"

    def test_default_lifetime_is_seven_days(self):
        service = TokenService(secret="unit-secret")
        payload = service.decode(service.issue("user-exp"))
        assert payload["exp"] - payload["iat"] == int(dt.timedelta(days=7).total_seconds())

    def test_expired_token_is_rejected(self):
        service = TokenService(secret="unit-secret", expires_in=dt.timedelta(seconds=-1))
        token = service.issue("user-old")
        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_wrong_secret_is_rejected(self):
        token = TokenService(secret="secret-a").issue("user-1")
        with pytest.raises(InvalidTokenError):
            TokenService(secret="secret-b").verify(token)

    def test_malformed_token_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            TokenService(secret="unit-secret").verify("invalid.token.here")

    def test_token_without_subject_is_rejected(self):
        token = jwt.encode({"foo": "bar"}, "unit-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            TokenService(secret="unit-secret").verify(token)

    def test_empty_secret_is_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret="")

    def test_module_service_uses_configured_settings(self):
        from app.config import settings
        assert token_service.secret == settings.jwt_secret
        assert token_service.expires_in == dt.timedelta(days=settings.jwt_expire_days)
