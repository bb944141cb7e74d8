"""
Unit tests for password hashing and token issuance.
"""

import pytest

from app.core.config import Settings
from app.core.exceptions import HashingError, TokenIssuanceError
from app.core.security import (
    TokenSubject,
    decode_token,
    hash_password,
    issue_tokens,
    verify_password,
)


@pytest.fixture
def token_settings():
    return Settings(SECRET_KEY="unit-secret", ACCESS_TOKEN_EXPIRE_MINUTES=5, REFRESH_TOKEN_EXPIRE_DAYS=1)


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        credential = hash_password("secret", rounds=4)

        assert credential != "secret"
        assert credential.startswith("$2")
        assert verify_password("secret", credential)
        assert not verify_password("Secret", credential)

    def test_same_password_hashes_differently(self):
        assert hash_password("secret", rounds=4) != hash_password("secret", rounds=4)

    def test_over_72_bytes_rejected(self):
        with pytest.raises(HashingError):
            hash_password("ä" * 40, rounds=4)

    def test_invalid_rounds_rejected(self):
        with pytest.raises(HashingError):
            hash_password("secret", rounds=1)

    def test_malformed_credential_does_not_verify(self):
        assert verify_password("secret", "not-a-bcrypt-hash") is False


class TestTokens:
    def test_issue_and_decode(self, token_settings):
        pair = issue_tokens("auth", TokenSubject(id=7, email="ada@example.com"), token_settings)

        assert pair.token_type == "bearer"
        assert pair.access_token != pair.refresh_token
        claims = decode_token(pair.access_token, token_settings, expected_type="access")
        assert claims["sub"] == "ada@example.com"
        assert claims["uid"] == 7
        assert claims["realm"] == "auth"

    def test_wrong_type_rejected(self, token_settings):
        pair = issue_tokens("auth", TokenSubject(id=1, email="a@example.com"), token_settings)

        with pytest.raises(TokenIssuanceError):
            decode_token(pair.refresh_token, token_settings, expected_type="access")

    def test_wrong_secret_rejected(self, token_settings):
        pair = issue_tokens("auth", TokenSubject(id=1, email="a@example.com"), token_settings)
        other = Settings(SECRET_KEY="another-secret")

        with pytest.raises(TokenIssuanceError):
            decode_token(pair.access_token, other)

    def test_expired_token_rejected(self):
        expired = Settings(SECRET_KEY="unit-secret", ACCESS_TOKEN_EXPIRE_MINUTES=-1)
        pair = issue_tokens("auth", TokenSubject(id=1, email="a@example.com"), expired)

        with pytest.raises(TokenIssuanceError):
            decode_token(pair.access_token, expired)

    def test_unsupported_algorithm(self):
        broken = Settings(SECRET_KEY="unit-secret", ALGORITHM="XS512")

        with pytest.raises(TokenIssuanceError):
            issue_tokens("auth", TokenSubject(id=1, email="a@example.com"), broken)
