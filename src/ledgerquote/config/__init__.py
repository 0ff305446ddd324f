"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int
from .errors import ConfigurationError, SchemaConfigurationError
from .logging import configure_logging
from .schemas import get_schema_catalog, load_schema
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "SchemaConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_schema_catalog",
    "get_storage_config",
    "load_schema",
    "optional_env_int",
]
