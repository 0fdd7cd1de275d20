"""Typed settings store on top of an interchangeable storage adapter.

Usage:
    adapter = open_storage("json", "settings.json")
    with ConfigStore(adapter, autosave=True) as store:
        store.set("dns.cache.max_entries", Setting.from_string("2000"))
        for key in store.find("dns"):
            print(key, store.get(key))
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..constants.schema import DEFAULT_SCHEMA
from ..domain.repositories.storage import StorageAdapter
from ..logging_config import get_logger
from ..models.setting import Setting, SettingInfo

logger = get_logger(__name__)

WILDCARD = "*"


class KeyMatches:
    """Keys matching a search pattern.

    Evaluated lazily against the store's current keys each time it is
    iterated, so it can be walked more than once.
    """

    def __init__(self, store: "ConfigStore", pattern: str):
        self._store = store
        self.pattern = pattern

    def matches(self, key: str) -> bool:
        return self.pattern == WILDCARD or self.pattern in key

    def __iter__(self) -> Iterator[str]:
        self._store._ensure_open()
        for key in self._store._iter_keys():
            if self.matches(key):
                yield key

    def __repr__(self) -> str:
        return f"KeyMatches(pattern={self.pattern!r})"


class ConfigStore:
    """Schema defaults combined with overrides persisted through a storage adapter."""

    def __init__(
        self,
        adapter: StorageAdapter,
        autosave: bool = True,
        schema: Optional[Iterable[SettingInfo]] = None,
    ):
        """Register the schema and load persisted overrides.

        Args:
            adapter: Storage the store takes ownership of
            autosave: Persist every ``set`` immediately instead of waiting for ``flush``
            schema: Known settings (defaults to the built-in schema)

        Raises:
            ValueError: the schema registers a key twice.
            StorageReadError: the adapter could not enumerate persisted pairs.
        """
        self._schema: dict[str, SettingInfo] = {}
        for info in DEFAULT_SCHEMA if schema is None else schema:
            if info.key in self._schema:
                raise ValueError(f"Duplicate schema key: {info.key}")
            self._schema[info.key] = info

        self._adapter = adapter
        self.autosave = autosave
        self._dirty: set[str] = set()
        self._closed = False

        raw_values = adapter.load_all()
        self._overrides: dict[str, Setting] = {
            key: Setting.from_string(raw) for key, raw in raw_values.items()
        }
        orphans = [key for key in self._overrides if key not in self._schema]
        if orphans:
            logger.debug("Keeping %d override(s) without schema entry: %s", len(orphans), ", ".join(orphans))
        logger.debug("Loaded %d override(s) for %d schema key(s)", len(self._overrides), len(self._schema))

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Config store is closed")

    def _iter_keys(self) -> Iterator[str]:
        yield from list(self._schema)
        for key in list(self._overrides):
            if key not in self._schema:
                yield key

    # Queries -------------------------------------------------------------

    def has(self, key: str) -> bool:
        self._ensure_open()
        return key in self._schema or key in self._overrides

    def get_info(self, key: str) -> Optional[SettingInfo]:
        """Schema entry for ``key``; ``None`` for orphans and unknown keys."""
        self._ensure_open()
        return self._schema.get(key)

    def get(self, key: str, fallback: Optional[Setting] = None) -> Setting:
        """Current value of ``key``.

        Resolution order: override, schema default, ``fallback``, then
        ``Setting.none()``. Never raises for unknown keys.
        """
        self._ensure_open()
        if key in self._overrides:
            return self._overrides[key]
        info = self._schema.get(key)
        if info is not None:
            return info.default
        if fallback is not None:
            return fallback
        return Setting.none()

    def find(self, pattern: str) -> KeyMatches:
        """Keys containing ``pattern`` (``"*"`` matches all).

        Schema keys come first in registration order, then orphan overrides
        in the order they were loaded or set.
        """
        self._ensure_open()
        return KeyMatches(self, pattern)

    @property
    def dirty_keys(self) -> frozenset[str]:
        """Keys set since the last successful persist."""
        return frozenset(self._dirty)

    # Mutations -----------------------------------------------------------

    def set(self, key: str, value: Setting) -> None:
        """Override ``key`` with ``value``.

        Keys missing from the schema are accepted. With autosave the value is
        written straight away; if that write fails the override stays applied
        and the key stays pending for :meth:`flush`.

        Raises:
            TypeError: ``value`` is not a Setting.
            StorageWriteError: autosave is on and the write failed.
        """
        self._ensure_open()
        if not isinstance(value, Setting):
            raise TypeError(f"Expected Setting, got {type(value).__name__}")
        if value.is_none:
            raise ValueError("Cannot store the empty setting")

        current = self._overrides.get(key)
        # 0.0 and -0.0 compare equal but render differently.
        if (
            key not in self._dirty
            and current is not None
            and current.kind is value.kind
            and current.to_string() == value.to_string()
        ):
            return
        self._overrides[key] = value
        self._dirty.add(key)
        logger.info("Setting updated: %s = %s", key, value.to_string())

        if self.autosave:
            self._adapter.save(key, value.to_string())
            self._dirty.discard(key)

    def flush(self) -> None:
        """Persist every pending override in one adapter call.

        Raises:
            StorageWriteError: nothing is marked persisted; retry later.
        """
        self._ensure_open()
        if not self._dirty:
            return
        pending = {key: self._overrides[key].to_string() for key in self._iter_keys() if key in self._dirty}
        self._adapter.save_many(pending)
        self._dirty.clear()
        logger.info("Flushed %d setting(s)", len(pending))

    # Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Release the adapter. Pending overrides are not flushed."""
        if self._closed:
            return
        if self._dirty:
            logger.warning("Closing with %d unsaved setting(s): %s", len(self._dirty), ", ".join(sorted(self._dirty)))
        self._adapter.close()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "ConfigStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
