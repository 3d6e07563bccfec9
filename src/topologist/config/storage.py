"""State storage location helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "topologist"
DATA_DIR_ENV: Final[str] = "TOPOLOGIST_DATA_DIR"
DEFAULT_STATE_FILENAME: Final[str] = "cluster-state.json"
DEFAULT_DB_FILENAME: Final[str] = "cluster-state.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    state_filename: str = DEFAULT_STATE_FILENAME
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def state_file_path(self) -> Path:
        return self.resolve_data_dir() / self.state_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.resolve_data_dir() / self.database_filename}"


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)
