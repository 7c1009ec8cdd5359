"""Application configuration module."""

import os
import re
from datetime import timedelta


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)


def parse_duration(value) -> timedelta:
    """Parse ``"7d"``, ``"12h"``, ``"30m"``, ``"45s"`` or plain seconds."""

    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(str(value or ""))
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[(unit or "s").lower()])


class Config:
    """Base configuration for the Flask application."""

    # Core
    MONGO_URI = os.getenv("MONGO_URI")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME")
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
    PORT = int(os.getenv("PORT", "5000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database connection retry loop
    DB_RETRY_INTERVAL = float(os.getenv("DB_RETRY_INTERVAL", "3"))
    DB_SERVER_SELECTION_TIMEOUT_MS = 2000

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]


REQUIRED_SETTINGS = ("MONGO_URI", "JWT_SECRET")


def validate_settings(settings) -> None:
    """Fail fast when settings the server cannot run without are absent."""

    missing = [name for name in REQUIRED_SETTINGS if not settings.get(name)]
    if missing:
        raise ConfigurationError(
            "Missing required configuration: {}.".format(", ".join(missing))
        )
    parse_duration(settings.get("JWT_EXPIRES_IN", "7d"))
