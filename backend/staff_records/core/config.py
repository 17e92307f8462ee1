"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Keys that must be present before the application is allowed to boot
REQUIRED_KEYS: Final[tuple[str, ...]] = (
    "SQLALCHEMY_DATABASE_URI",
    "JWT_SECRET",
    "JWT_EXPIRES_IN",
    "JWT_REFRESH_SECRET",
    "JWT_REFRESH_EXPIRES_IN",
    "PORT",
)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid at boot."""


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


def parse_duration(value: str | int | timedelta) -> timedelta:
    """Convert ``"15m"``, ``"24h"``, ``"7d"`` or bare seconds to a ``timedelta``.

    :param value: Raw configuration value.
    :type value: str | int | timedelta
    :returns: Parsed duration.
    :rtype: datetime.timedelta
    :raises ConfigurationError: When the value cannot be parsed.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value or ""))
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET: str | None
        HMAC secret for access tokens. Required.
    JWT_EXPIRES_IN: str
        Access token lifetime (``"24h"`` by default).
    JWT_REFRESH_SECRET: str | None
        HMAC secret for refresh tokens; must differ from ``JWT_SECRET``.
    JWT_REFRESH_EXPIRES_IN: str
        Refresh token lifetime (``"7d"`` by default).
    PORT: str | None
        Listening port used by gunicorn and ``flask run``.
    SQLALCHEMY_DATABASE_URI: str | None
        Database connection string consumed by SQLAlchemy.
    TOKEN_BLACKLIST_BACKEND: str
        ``"memory"`` (single process) or ``"redis"`` (shared, needs ``REDIS_URL``).
    TOKEN_BLACKLIST_SWEEP_MINUTES: int
        Interval of the expired-entry sweep.
    SCHEDULER_ENABLED: bool
        Start the background scheduler running the sweep.
    ACT_NAME_MAX_RETRIES: int
        Attempts to allocate an administrative act number before giving up.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "24h")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "7d")
    JWT_ALGORITHM = "HS256"

    TOKEN_BLACKLIST_BACKEND = os.getenv("TOKEN_BLACKLIST_BACKEND", "memory")
    TOKEN_BLACKLIST_SWEEP_MINUTES = int(os.getenv("TOKEN_BLACKLIST_SWEEP_MINUTES", "15"))
    SCHEDULER_ENABLED = env_bool("SCHEDULER_ENABLED", True)
    REDIS_URL = os.getenv("REDIS_URL")

    PORT = os.getenv("PORT")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Workflows
    ACT_NAME_MAX_RETRIES = int(os.getenv("ACT_NAME_MAX_RETRIES", "5"))

    # Seeding (`flask seed run` bootstrap account)
    SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL")
    SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD")
    SEED_ADMIN_DOCUMENT = os.getenv("SEED_ADMIN_DOCUMENT", "1000000000")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Proxy, logging & CORS
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXY_HOPS = int(os.getenv("PROXY_HOPS", "1"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default. Secrets are still required; put them in a
    local ``.env`` file.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships fixed throwaway secrets and keeps the scheduler off.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    JWT_EXPIRES_IN = "24h"
    JWT_REFRESH_EXPIRES_IN = "7d"
    PORT = "8000"
    TOKEN_BLACKLIST_BACKEND = "memory"
    SCHEDULER_ENABLED = False
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Abort startup when required settings are missing or malformed.

    :param config: Loaded Flask configuration.
    :type config: Mapping[str, Any]
    :raises ConfigurationError: Listing every offending key.
    """
    problems: list[str] = []
    for key in REQUIRED_KEYS:
        value = config.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            problems.append(f"{key} is required")

    for key in ("JWT_EXPIRES_IN", "JWT_REFRESH_EXPIRES_IN"):
        value = config.get(key)
        if not value:
            continue
        try:
            if parse_duration(value) <= timedelta(0):
                problems.append(f"{key} must be positive")
        except ConfigurationError:
            problems.append(f"{key} is not a valid duration")

    port = config.get("PORT")
    if port:
        try:
            if not 0 < int(port) < 65536:
                problems.append("PORT must be between 1 and 65535")
        except (TypeError, ValueError):
            problems.append("PORT must be an integer")

    secret, refresh_secret = config.get("JWT_SECRET"), config.get("JWT_REFRESH_SECRET")
    if secret and refresh_secret and secret == refresh_secret:
        problems.append("JWT_REFRESH_SECRET must differ from JWT_SECRET")

    if str(config.get("TOKEN_BLACKLIST_BACKEND", "memory")).lower() == "redis" and not config.get(
        "REDIS_URL"
    ):
        problems.append("REDIS_URL is required when TOKEN_BLACKLIST_BACKEND=redis")

    if problems:
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
