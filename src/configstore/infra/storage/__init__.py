"""Concrete storage engines and engine selection."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from ...domain.repositories.storage import StorageAdapter
from .json_file import JsonStorageAdapter
from .sqlite import SqliteStorageAdapter


class StorageEngine(str, Enum):
    """Supported storage engines."""

    SQLITE = "sqlite"
    JSON = "json"


_ADAPTERS = {
    StorageEngine.SQLITE: SqliteStorageAdapter,
    StorageEngine.JSON: JsonStorageAdapter,
}


def open_storage(engine: StorageEngine | str, path: Path | str) -> StorageAdapter:
    """Open the adapter for ``engine`` at ``path``.

    Raises:
        ValueError: unknown engine name.
        StorageInitError: the file exists but is not valid for the engine.
    """
    return _ADAPTERS[StorageEngine(engine)](path)


__all__ = [
    "JsonStorageAdapter",
    "SqliteStorageAdapter",
    "StorageEngine",
    "open_storage",
]
