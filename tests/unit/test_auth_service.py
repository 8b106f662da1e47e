"""Unit tests for AuthService token handling."""
import time

import jwt
import pytest

from userbase.application.services import AuthService


class TestTokens:

    @pytest.fixture
    def auth(self):
        return AuthService(secret="test-secret-that-is-long-enough-for-hs256", ttl=60, refresh_ttl=600)

    def test_round_trip(self, auth):
        token = auth.generate_token("user-1")

        payload = auth.decode_token(token)

        assert payload["userId"] == "user-1"
        assert payload["exp"] - payload["iat"] == 60

    def test_wrong_secret(self, auth):
        token = AuthService(secret="another-secret-that-is-long-enough-for-hs256").generate_token("user-1")

        with pytest.raises(jwt.InvalidSignatureError):
            auth.decode_token(token)

    def test_expired_token(self, auth):
        token = auth.generate_token("user-1", issued_at=int(time.time()) - 120)

        with pytest.raises(jwt.ExpiredSignatureError):
            auth.decode_token(token)

        assert auth.decode_expired_token(token)["userId"] == "user-1"

    def test_can_refresh_inside_window(self, auth):
        assert auth.can_refresh({"iat": int(time.time()) - 300}) is True

    def test_cannot_refresh_outside_window(self, auth):
        assert auth.can_refresh({"iat": int(time.time()) - 601}) is False

    def test_cannot_refresh_without_iat(self, auth):
        assert auth.can_refresh({"userId": "user-1"}) is False
