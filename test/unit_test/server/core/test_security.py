"""Unit tests for password hashing and access tokens."""

import time

import jwt

from corporate_advisor.server.core.config import AuthConfig
from corporate_advisor.server.core.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

CONFIG = AuthConfig(secret_key="test-secret", access_token_expire_minutes=5)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_malformed_hash_is_rejected(self):
        assert verify_password("secret123", "not-a-hash") is False


class TestAccessTokens:
    def test_round_trip(self):
        token = create_access_token("user-1", "admin", config=CONFIG)

        claims = decode_access_token(token, config=CONFIG)

        assert claims["sub"] == "user-1"
        assert claims["role"] == "admin"
        assert claims["exp"] - claims["iat"] == 300

    def test_wrong_secret(self):
        token = create_access_token("user-1", "user", config=CONFIG)

        assert decode_access_token(token, config=AuthConfig(secret_key="other")) is None

    def test_expired_token(self):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "user-1", "role": "user", "iat": now - 120, "exp": now - 60}, "test-secret", algorithm=ALGORITHM
        )

        assert decode_access_token(token, config=CONFIG) is None

    def test_garbage(self):
        assert decode_access_token("garbage", config=CONFIG) is None
