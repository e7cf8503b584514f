"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_float, optional_env_var

APP_DIR_NAME: Final[str] = "catalogmerge"
DEFAULT_DB_FILENAME: Final[str] = "catalogmerge.db"
DEFAULT_DB_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    timeout_seconds: float = DEFAULT_DB_TIMEOUT_SECONDS

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")

    def connect_args(self) -> dict[str, object]:
        # bounds how long a store call may block on a locked database
        if self.is_sqlite:
            return {"timeout": self.timeout_seconds}
        return {}


def default_data_dir() -> Path:
    """Return the directory where catalogmerge stores persistent data."""

    env_dir = optional_env_var("CATALOGMERGE_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")

    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    return StorageConfig(data_dir=default_data_dir())


def get_database_config() -> DatabaseConfig:
    uri = optional_env_var("DATABASE_URI") or get_storage_config().database_uri()
    timeout = env_float("DATABASE_TIMEOUT_SECONDS", DEFAULT_DB_TIMEOUT_SECONDS, minimum=0.0)
    return DatabaseConfig(uri=uri, timeout_seconds=timeout)


def get_database_uri() -> str:
    """Compute the database URI, respecting overrides."""

    return get_database_config().uri
