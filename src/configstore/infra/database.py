"""Database infrastructure for the relational storage engine."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import inspect
from sqlalchemy.engine import URL, Engine
from sqlmodel import Session, SQLModel, create_engine

from ..models.stored_setting import StoredSetting

REQUIRED_COLUMNS = frozenset({"key", "value"})


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLModel engine bound to a SQLite file."""

    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(URL.create("sqlite", database=str(db_path)), connect_args={"check_same_thread": False})


def init_database(engine: Engine) -> None:
    """Create the settings table if absent and check an existing one has the expected columns."""

    SQLModel.metadata.create_all(engine, tables=[StoredSetting.__table__])
    columns = {column["name"] for column in inspect(engine).get_columns(StoredSetting.__tablename__)}
    missing = REQUIRED_COLUMNS - columns
    if missing:
        raise ValueError(
            f"Table '{StoredSetting.__tablename__}' is missing columns: {', '.join(sorted(missing))}"
        )


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around operations."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
