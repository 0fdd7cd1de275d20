"""JSON file storage engine.

The document is a single flat object whose values are all strings, e.g.::

    {
      "dns.cache.max_entries": "1000",
      "useragent.default_page": "about:blank"
    }

Every write replaces the whole file atomically: the new document goes to a
temporary file in the same directory, is fsynced, then moved over the target.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

from ...errors import StorageInitError, StorageReadError, StorageWriteError
from ...logging_config import get_logger

logger = get_logger(__name__)


def _validate_document(data: Any) -> dict[str, str]:
    """Return ``data`` if it is a flat object of strings, else raise ValueError."""

    if not isinstance(data, dict):
        raise ValueError(f"root must be a JSON object, not {type(data).__name__}")
    bad_keys = [key for key, value in data.items() if not isinstance(value, str)]
    if bad_keys:
        raise ValueError(f"values must be JSON strings; offending keys: {', '.join(bad_keys)}")
    return data


class JsonStorageAdapter:
    """Persists settings as properties of one JSON object in a text file."""

    def __init__(self, path: Path | str):
        """Open the document at ``path``, creating an empty one if missing.

        Raises:
            StorageInitError: the file exists but is not a flat object of strings.
        """
        self.path = Path(path)
        self._closed = False
        if self.path.exists():
            try:
                self._document = self._read_document()
            except (OSError, ValueError) as exc:
                logger.error("Invalid settings document %s: %s", self.path, exc)
                raise StorageInitError(f"{self.path} is not a valid settings document: {exc}", path=self.path) from exc
            logger.debug("Opened JSON settings store at %s (%d keys)", self.path, len(self._document))
        else:
            self._document = {}
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write_document(self._document)
            except OSError as exc:
                raise StorageInitError(f"Cannot create settings document at {self.path}: {exc}", path=self.path) from exc
            logger.info("Created empty JSON settings store at %s", self.path)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Storage for {self.path} is closed")

    def _read_document(self) -> dict[str, str]:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        with self.path.open("r", encoding="utf-8") as fh:
            return _validate_document(json.load(fh))

    def _write_document(self, document: Mapping[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def load_all(self) -> dict[str, str]:
        """Re-read the document from disk."""
        self._ensure_open()
        try:
            self._document = self._read_document()
        except (OSError, ValueError) as exc:
            logger.error("Failed to read settings from %s: %s", self.path, exc)
            raise StorageReadError(f"Cannot read settings from {self.path}: {exc}", path=self.path) from exc
        return dict(self._document)

    def save(self, key: str, raw_value: str) -> None:
        self.save_many({key: raw_value})

    def save_many(self, items: Mapping[str, str]) -> None:
        """Rewrite the document with ``items`` merged in."""
        self._ensure_open()
        if not items:
            return
        document = dict(self._document)
        document.update(items)
        try:
            self._write_document(document)
        except OSError as exc:
            logger.error("Failed to write settings to %s: %s", self.path, exc)
            raise StorageWriteError(f"Cannot write settings to {self.path}: {exc}", path=self.path) from exc
        self._document = document
        logger.debug("Saved %d setting(s) to %s", len(items), self.path)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> "JsonStorageAdapter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
