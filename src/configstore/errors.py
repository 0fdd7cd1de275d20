"""Exception types raised by the config store and its storage adapters."""

from __future__ import annotations

from pathlib import Path


class ConfigStoreError(Exception):
    """Base class for all config store failures."""


class StorageError(ConfigStoreError):
    """A storage adapter could not complete an operation on its backing file."""

    def __init__(self, message: str, *, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class StorageInitError(StorageError):
    """The backing file exists but is not a valid instance of the adapter's format."""


class StorageReadError(StorageError):
    """Persisted pairs could not be enumerated (I/O failure or corrupt content)."""


class StorageWriteError(StorageError):
    """A key/value pair could not be persisted."""


__all__ = [
    "ConfigStoreError",
    "StorageError",
    "StorageInitError",
    "StorageReadError",
    "StorageWriteError",
]
