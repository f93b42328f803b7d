"""Configuration management for awskit.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from typing import Optional


class Config:
    """Application configuration loaded from environment variables."""

    # AWS client configuration
    @staticmethod
    def aws_region() -> Optional[str]:
        """Get default AWS region from environment."""
        return os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")

    @staticmethod
    def aws_profile() -> Optional[str]:
        """Get default AWS profile from environment."""
        return os.environ.get("AWS_PROFILE")

    # Logging
    @staticmethod
    def log_level() -> str:
        """Get log level name (default WARNING)."""
        return os.environ.get("AWSKIT_LOG_LEVEL", "WARNING")

    @staticmethod
    def log_format() -> str:
        """Get log renderer name: 'json' or 'console'."""
        return os.environ.get("AWSKIT_LOG_FORMAT", "json")

    # Batch defaults
    @staticmethod
    def max_concurrency() -> int:
        """Get default maximum concurrent batch requests."""
        return Config._int_env("AWSKIT_MAX_CONCURRENCY", 10)

    @staticmethod
    def max_retries() -> int:
        """Get default maximum retry attempts per batch."""
        return Config._int_env("AWSKIT_MAX_RETRIES", 3)

    # Helper methods
    @staticmethod
    def _int_env(name: str, default: int) -> int:
        raw = os.environ.get(name)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError:
            return default


# Singleton instance for easy access
config = Config()
