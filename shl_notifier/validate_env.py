"""Fail-fast environment validation for the notifier service.

Runs before settings are built so a misconfigured production container
stops at startup instead of polling without credentials.
"""

from __future__ import annotations

import os
from functools import lru_cache
from urllib.parse import urlparse

ALLOWED_ENVIRONMENTS = {"development", "staging", "production"}

_TRUTHY = {"1", "true", "yes", "on"}


def require_env(name: str) -> str:
    """Fetch an environment variable or raise RuntimeError if missing."""
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"{name} is required and must be set before startup.")
    return value.strip()


def validate_environment_value(environment: str) -> None:
    """Ensure ENVIRONMENT is one of the allowed values."""
    if environment not in ALLOWED_ENVIRONMENTS:
        allowed = ", ".join(sorted(ALLOWED_ENVIRONMENTS))
        raise RuntimeError(f"ENVIRONMENT must be one of: {allowed}.")


def validate_non_local_url(name: str, value: str) -> None:
    """Ensure a URL does not point to localhost in production."""
    parsed = urlparse(value)
    host = parsed.hostname
    if not host:
        raise RuntimeError(f"{name} must be a valid URL (missing hostname).")
    if host in {"localhost", "127.0.0.1"}:
        raise RuntimeError(f"{name} must not point to localhost in production.")


def _push_muted() -> bool:
    return os.getenv("MUTE_NOTIFICATIONS", "").strip().lower() in _TRUTHY


@lru_cache(maxsize=1)
def validate_env() -> None:
    """Validate required environment variables before the service starts.

    Production needs feed credentials, and APNs credentials unless pushes
    are explicitly muted with MUTE_NOTIFICATIONS.
    """
    environment = os.getenv("ENVIRONMENT", "development").strip() or "development"
    validate_environment_value(environment)

    if environment == "production":
        require_env("SHL_CLIENT_ID")
        require_env("SHL_CLIENT_SECRET")

        feed_url = os.getenv("FEED_CONFIG__BASE_URL")
        if feed_url:
            validate_non_local_url("FEED_CONFIG__BASE_URL", feed_url)

        if not _push_muted():
            require_env("APN_KEY_PATH")
            require_env("APN_KEY_ID")
            require_env("APN_TEAM_ID")
