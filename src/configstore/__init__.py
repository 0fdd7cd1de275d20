"""Typed configuration store with SQLite and JSON storage engines."""

from __future__ import annotations

from .errors import (
    ConfigStoreError,
    StorageError,
    StorageInitError,
    StorageReadError,
    StorageWriteError,
)
from .infra.storage import JsonStorageAdapter, SqliteStorageAdapter, StorageEngine, open_storage
from .models.setting import Setting, SettingInfo, SettingKind
from .services.config_store import ConfigStore

__all__ = [
    "ConfigStore",
    "ConfigStoreError",
    "JsonStorageAdapter",
    "Setting",
    "SettingInfo",
    "SettingKind",
    "SqliteStorageAdapter",
    "StorageEngine",
    "StorageError",
    "StorageInitError",
    "StorageReadError",
    "StorageWriteError",
    "open_storage",
]
