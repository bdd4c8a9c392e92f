"""Location of the castsync node database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "castsync"
DEFAULT_DB_FILENAME: Final[str] = "castsync.db"
DATA_DIR_ENV_VAR: Final[str] = "CASTSYNC_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    @property
    def database_file(self) -> Path:
        return self.data_dir / DEFAULT_DB_FILENAME

    def database_uri(self) -> str:
        """SQLite URI of the node database; creates ``data_dir`` on first use."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_file}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    """``CASTSYNC_DATA_DIR``, else ``$XDG_DATA_HOME/castsync`` (``~/.local/share`` fallback)."""

    explicit = os.getenv(DATA_DIR_ENV_VAR)
    if explicit:
        data_dir = Path(explicit)
    else:
        xdg = os.getenv("XDG_DATA_HOME")
        data_dir = (Path(xdg) if xdg else Path.home() / ".local" / "share") / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = os.getenv(DATABASE_URI_ENV_VAR)
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
