"""Configuration management for httpguard.

Centralizes all environment variable access for better testability.
Unset variables fall back to the documented defaults.
"""

import os
from typing import Optional

from httpguard.core.retry_config import NotificationSettings, RetryPolicy

_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in _TRUTHY


class Config:
    """Application configuration loaded from environment variables."""

    # Retry policy
    @staticmethod
    def max_retries() -> int:
        """Retries allowed after the first attempt."""
        return _env_int("HTTPGUARD_MAX_RETRIES", 3)

    @staticmethod
    def base_delay_ms() -> int:
        """Backoff delay before the first retry."""
        return _env_int("HTTPGUARD_BASE_DELAY_MS", 1000)

    @staticmethod
    def max_delay_ms() -> int:
        """Upper bound for the exponential part of the backoff."""
        return _env_int("HTTPGUARD_MAX_DELAY_MS", 30000)

    @staticmethod
    def backoff_factor() -> float:
        return _env_float("HTTPGUARD_BACKOFF_FACTOR", 2.0)

    @staticmethod
    def timeout_ms() -> int:
        """Deadline applied to every attempt."""
        return _env_int("HTTPGUARD_TIMEOUT_MS", 10000)

    @staticmethod
    def enable_retry() -> bool:
        return _env_bool("HTTPGUARD_ENABLE_RETRY", True)

    # Notifications
    @staticmethod
    def show_notifications() -> bool:
        return _env_bool("HTTPGUARD_SHOW_NOTIFICATIONS", True)

    @staticmethod
    def debug_mode() -> bool:
        return _env_bool("HTTPGUARD_DEBUG", False)

    # Logging
    @staticmethod
    def log_level() -> str:
        return os.environ.get("HTTPGUARD_LOG_LEVEL", "INFO")

    # Helper methods
    @staticmethod
    def default_policy(custom_messages: Optional[dict] = None) -> RetryPolicy:
        """Build the startup RetryPolicy from the environment."""
        return RetryPolicy(
            max_retries=Config.max_retries(),
            base_delay_ms=Config.base_delay_ms(),
            max_delay_ms=Config.max_delay_ms(),
            backoff_factor=Config.backoff_factor(),
            enable_retry=Config.enable_retry(),
            timeout_ms=Config.timeout_ms(),
            custom_messages=dict(custom_messages or {}),
        )

    @staticmethod
    def default_settings() -> NotificationSettings:
        """Build the startup NotificationSettings from the environment."""
        return NotificationSettings(
            show_notifications=Config.show_notifications(),
            debug_mode=Config.debug_mode(),
        )


# Singleton instance for easy access
config = Config()
