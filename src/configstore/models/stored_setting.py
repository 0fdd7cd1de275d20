"""Row model for the relational storage engine."""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import Text
from sqlmodel import Field, SQLModel


class StoredSetting(SQLModel, table=True):
    """Persisted override: a setting key and its string-encoded value."""

    __tablename__: ClassVar[str] = "settings"

    key: str = Field(primary_key=True, sa_type=Text)
    value: str = Field(nullable=False, sa_type=Text)
