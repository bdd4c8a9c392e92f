"""Application configuration helpers."""

from __future__ import annotations

from castsync.common.logging import configure_logging

from .env import optional_env_int
from .errors import ConfigurationError
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config, node_type_env_var

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_config",
    "get_storage_config",
    "get_sync_config",
    "node_type_env_var",
    "optional_env_int",
]
