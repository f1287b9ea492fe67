"""Appender errors."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when an appender cannot be built from the given settings."""
