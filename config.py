import os

from errors import AppMessage, ConfigError

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # SQLite database file stored beside the app as rexy.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "rexy.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Access tokens are signed with this; refresh tokens use a per-session secret
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "")

    # 15 minutes
    ACCESS_TOKEN_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", str(15 * 60)))

    # 7 days
    REFRESH_TOKEN_TTL_SECONDS = int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", str(7 * 24 * 60 * 60)))

    # bcrypt cost for passwords and refresh secrets
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Pagination
    PAGINATION_DEFAULT_LIMIT = 10
    PAGINATION_MAX_LIMIT = 100

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    ACCESS_TOKEN_SECRET = "test-access-secret-for-automation-only-0123456789"
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = "WARNING"


def validate_config(config) -> None:
    """
    Fails fast on settings the core cannot run without.
    `config` is any mapping (e.g. app.config).
    """
    secret = config.get("ACCESS_TOKEN_SECRET")
    if not isinstance(secret, str) or not secret.strip():
        raise ConfigError(AppMessage.ACCESS_SECRET_MISSING)

    db_url = config.get("SQLALCHEMY_DATABASE_URI")
    if not isinstance(db_url, str) or not db_url.strip():
        raise ConfigError(AppMessage.DATABASE_URL_MISSING)

    for key in ("ACCESS_TOKEN_TTL_SECONDS", "REFRESH_TOKEN_TTL_SECONDS"):
        if int(config.get(key) or 0) <= 0:
            raise ConfigError(AppMessage.INVALID_TOKEN_TTL, context={"key": key})
