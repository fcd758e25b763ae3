"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

DEFAULT_AVATAR_URL: Final[str] = (
    "https://www.pngall.com/wp-content/uploads/5/User-Profile-PNG-Download-Image.png"
)

# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    ACCESS_TOKEN_SECRET: str
        Signing key for short-lived access tokens.
    REFRESH_TOKEN_SECRET: str
        Signing key for long-lived refresh tokens. Must differ from the
        access key so one token type can never pass as the other.
    ACCESS_TOKEN_EXPIRES_MINUTES: int
        Access token lifetime.
    REFRESH_TOKEN_EXPIRES_DAYS: int
        Refresh token lifetime.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        When set, refresh tokens are kept in Redis instead of the users table.
    COOKIE_HARDENED: bool
        Marks credential cookies ``secure`` with ``SameSite=Strict``.
    EXPOSE_ERROR_DETAILS: bool
        Appends underlying token-verification causes to 401 messages.
    WATCH_HISTORY_DEDUP: bool
        Move a re-watched video to the end instead of appending a duplicate.
    WATCH_HISTORY_MAX: int
        Maximum history length; ``0`` keeps everything.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv(
        "ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS_TOKEN_SECRET_0123456789"
    )
    REFRESH_TOKEN_SECRET = os.getenv(
        "REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH_TOKEN_SECRET_0123456789"
    )
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES_MINUTES = env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15)
    REFRESH_TOKEN_EXPIRES_DAYS = env_int("REFRESH_TOKEN_EXPIRES_DAYS", 10)

    # Cookies
    ACCESS_COOKIE_NAME = "accessToken"
    REFRESH_COOKIE_NAME = "refreshToken"
    COOKIE_HARDENED = env_bool("COOKIE_HARDENED", False)
    EXPOSE_ERROR_DETAILS = env_bool("EXPOSE_ERROR_DETAILS", True)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # Media
    DEFAULT_AVATAR_URL = os.getenv("DEFAULT_AVATAR_URL", DEFAULT_AVATAR_URL)
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./public/media")
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/media")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)

    # Watch history policy
    WATCH_HISTORY_DEDUP = env_bool("WATCH_HISTORY_DEDUP", False)
    WATCH_HISTORY_MAX = env_int("WATCH_HISTORY_MAX", 0)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and keeps credential cookies relaxed so
    they travel over plain HTTP on localhost.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis; refresh tokens live on the users table.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    REDIS_URL = None
    ACCESS_TOKEN_SECRET = "testing-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "testing-refresh-secret-0123456789abcdef"
    COOKIE_HARDENED = False
    EXPOSE_ERROR_DETAILS = True
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Credential cookies are hardened and token failure causes are kept out of
    client-facing messages.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    COOKIE_HARDENED = env_bool("COOKIE_HARDENED", True)
    EXPOSE_ERROR_DETAILS = env_bool("EXPOSE_ERROR_DETAILS", False)


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
