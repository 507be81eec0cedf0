"""Exception types raised by feed_atmosphere."""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised when required configuration (credentials, API keys) is missing or invalid."""
