"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class SchemaConfigurationError(ConfigurationError):
    """Raised when a quote schema file cannot be read or does not validate."""
