import pytest

from app import create_app
from config import TestConfig, validate_config
from errors import AppMessage, ConfigError
from security.tokens import TokenIssuer


class NoSecretConfig(TestConfig):
    ACCESS_TOKEN_SECRET = ""


def test_validate_config_accepts_test_config():
    validate_config({k: getattr(TestConfig, k) for k in dir(TestConfig) if k.isupper()})


@pytest.mark.parametrize("secret", ["", "   ", None])
def test_validate_config_rejects_missing_secret(secret):
    with pytest.raises(ConfigError) as exc:
        validate_config({
            "ACCESS_TOKEN_SECRET": secret,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "ACCESS_TOKEN_TTL_SECONDS": 60,
            "REFRESH_TOKEN_TTL_SECONDS": 60,
        })
    assert exc.value.message == AppMessage.ACCESS_SECRET_MISSING


def test_validate_config_rejects_bad_ttl():
    with pytest.raises(ConfigError) as exc:
        validate_config({
            "ACCESS_TOKEN_SECRET": "s",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "ACCESS_TOKEN_TTL_SECONDS": 0,
            "REFRESH_TOKEN_TTL_SECONDS": 60,
        })
    assert exc.value.message == AppMessage.INVALID_TOKEN_TTL


def test_app_refuses_to_start_without_secret():
    with pytest.raises(ConfigError):
        create_app(NoSecretConfig)


def test_token_issuer_requires_secret():
    with pytest.raises(ConfigError):
        TokenIssuer("", access_ttl_seconds=60, refresh_ttl_seconds=60)
