from datetime import timedelta

import pytest

from storefront.core.config import Settings
from storefront.core.security import TokenConfig, TokenError, TokenService

from tests.conftest import TEST_SECRET


class TestIssueAndValidate:
    def test_fresh_token_is_valid_for_its_subject(self, token_service):
        token = token_service.issue("alice", 1)

        assert token_service.validate(token, "alice") is True

    def test_token_is_not_valid_for_another_username(self, token_service):
        token = token_service.issue("alice", 1)

        assert token_service.validate(token, "bob") is False

    def test_expired_token_is_not_valid(self):
        expired_service = TokenService(TokenConfig(secret=TEST_SECRET, expiration=timedelta(seconds=-5)))
        token = expired_service.issue("alice", 1)

        assert expired_service.validate(token, "alice") is False

    def test_tampered_token_is_not_valid(self, token_service):
        token = token_service.issue("alice", 1)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[:-4] + ("AAAA" if signature[-4:] != "AAAA" else "BBBB")])

        assert token_service.validate(tampered, "alice") is False

    def test_token_signed_with_other_key_is_not_valid(self, token_service):
        other = TokenService(TokenConfig(secret="another-signing-key-0123456789-abcdefghij"))
        token = other.issue("alice", 1)

        assert token_service.validate(token, "alice") is False

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c"])
    def test_malformed_token_is_not_valid_and_does_not_raise(self, token_service, garbage):
        assert token_service.validate(garbage, "alice") is False


class TestExtractClaims:
    def test_extracts_username_and_user_id(self, token_service):
        token = token_service.issue("alice", 42)

        assert token_service.extract_username(token) == "alice"
        assert token_service.extract_user_id(token) == 42

    def test_unparseable_token_raises_token_error(self, token_service):
        with pytest.raises(TokenError):
            token_service.extract_username("not-a-token")
        with pytest.raises(TokenError):
            token_service.extract_user_id("not-a-token")

    def test_expired_token_raises_token_error(self):
        expired_service = TokenService(TokenConfig(secret=TEST_SECRET, expiration=timedelta(seconds=-5)))
        token = expired_service.issue("alice", 1)

        with pytest.raises(TokenError):
            expired_service.extract_username(token)


class TestConfiguration:
    def test_short_secret_is_rejected(self):
        with pytest.raises(ValueError):
            TokenConfig(secret="too-short")

    def test_config_is_immutable(self, token_service):
        with pytest.raises(Exception):
            token_service.config.secret = "x" * 64

    def test_settings_refuse_short_secret(self):
        with pytest.raises(ValueError):
            Settings(JWT_SECRET="short")

    def test_expiration_comes_from_milliseconds(self):
        config = TokenConfig.from_settings(Settings(JWT_SECRET=TEST_SECRET, JWT_EXPIRATION_MS=60000))

        assert config.expiration == timedelta(minutes=1)
        assert config.algorithm == "HS256"

    def test_default_expiration_is_one_day(self):
        config = TokenConfig.from_settings(Settings(JWT_SECRET=TEST_SECRET))

        assert config.expiration == timedelta(hours=24)
