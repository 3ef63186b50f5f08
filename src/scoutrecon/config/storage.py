"""Locations of the files scoutrecon keeps on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "SCOUTRECON_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"

DATABASE_FILENAME: Final[str] = "scoutrecon.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
VALIDATION_CONFIG_FILENAME: Final[str] = "validation_config.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Root directory for the scouting database, HTTP cache and validation settings.

    The directory is created the first time a file path inside it is requested.
    """

    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file_path(self, filename: str, *, ensure: bool = True) -> Path:
        directory = self.resolve_data_dir()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(DATABASE_FILENAME, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(HTTP_CACHE_FILENAME, ensure=ensure)

    def validation_config_path(self, *, ensure: bool = True) -> Path:
        return self.file_path(VALIDATION_CONFIG_FILENAME, ensure=ensure)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_ENV)
    return StorageConfig(
        data_dir=Path(override) if override else _platform_data_home() / "scoutrecon"
    )


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    if uri := os.getenv(DATABASE_URI_ENV):
        return DatabaseConfig(uri=uri)
    database_path = (storage or get_storage_config()).database_path()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{database_path}")
