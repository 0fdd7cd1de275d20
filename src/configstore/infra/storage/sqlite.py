"""SQLite storage engine backed by SQLModel."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...errors import StorageInitError, StorageReadError, StorageWriteError
from ...logging_config import get_logger
from ...models.stored_setting import StoredSetting
from ..database import create_db_engine, init_database, session_scope

logger = get_logger(__name__)


class SqliteStorageAdapter:
    """Persists settings as rows of the ``settings`` table in a SQLite file."""

    def __init__(self, path: Path | str):
        """Open (or create) the database at ``path``.

        Raises:
            StorageInitError: the file is not a SQLite database, or its
                ``settings`` table lacks the expected columns.
        """
        self.path = Path(path)
        try:
            self.engine = create_db_engine(self.path)
        except OSError as exc:
            raise StorageInitError(f"Cannot create database at {self.path}: {exc}", path=self.path) from exc
        try:
            init_database(self.engine)
        except (SQLAlchemyError, ValueError) as exc:
            self.engine.dispose()
            logger.error("Invalid settings database %s: %s", self.path, exc)
            raise StorageInitError(f"{self.path} is not a valid settings database: {exc}", path=self.path) from exc
        self._closed = False
        logger.debug("Opened SQLite settings store at %s", self.path)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Storage for {self.path} is closed")

    def load_all(self) -> dict[str, str]:
        self._ensure_open()
        try:
            with session_scope(self.engine) as session:
                rows = session.exec(select(StoredSetting).order_by(StoredSetting.key)).all()
                return {row.key: row.value for row in rows}
        except SQLAlchemyError as exc:
            logger.error("Failed to read settings from %s: %s", self.path, exc)
            raise StorageReadError(f"Cannot read settings from {self.path}: {exc}", path=self.path) from exc

    def save(self, key: str, raw_value: str) -> None:
        self.save_many({key: raw_value})

    def save_many(self, items: Mapping[str, str]) -> None:
        """Upsert all pairs inside a single transaction."""
        self._ensure_open()
        if not items:
            return
        try:
            with session_scope(self.engine) as session:
                for key, raw_value in items.items():
                    self._upsert(session, key, raw_value)
        except SQLAlchemyError as exc:
            logger.error("Failed to write settings to %s: %s", self.path, exc)
            raise StorageWriteError(f"Cannot write settings to {self.path}: {exc}", path=self.path) from exc
        logger.debug("Saved %d setting(s) to %s", len(items), self.path)

    @staticmethod
    def _upsert(session: Session, key: str, raw_value: str) -> None:
        existing = session.get(StoredSetting, key)
        if existing:
            existing.value = raw_value
            session.add(existing)
        else:
            session.add(StoredSetting(key=key, value=raw_value))

    def close(self) -> None:
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
        logger.debug("Closed SQLite settings store at %s", self.path)

    def __enter__(self) -> "SqliteStorageAdapter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
