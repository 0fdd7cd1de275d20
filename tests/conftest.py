"""Pytest configuration and shared fixtures for configstore tests.

Storage fixtures work against files under ``tmp_path`` so no test touches a
real settings file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping

import pytest

from configstore.errors import StorageWriteError
from configstore.infra.storage import open_storage
from configstore.logging_config import ROOT_LOGGER_NAME
from configstore.models.setting import Setting, SettingInfo

ENGINE_FILENAMES = {"sqlite": "settings.db", "json": "settings.json"}


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging (e.g. during CLI tests)."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Schema Fixtures
# =============================================================================


@pytest.fixture
def network_schema() -> list[SettingInfo]:
    """Small schema with two related keys and one unrelated key."""

    return [
        SettingInfo("network.timeout", Setting.int_(30), "Request timeout in seconds"),
        SettingInfo("network.retries", Setting.int_(3), "Retries before giving up"),
        SettingInfo("ui.theme", Setting.string("dark"), "Colour theme"),
    ]


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture(params=sorted(ENGINE_FILENAMES))
def engine_name(request) -> str:
    """Run the test once per storage engine."""
    return request.param


@pytest.fixture
def storage_path(tmp_path: Path, engine_name: str) -> Path:
    return tmp_path / ENGINE_FILENAMES[engine_name]


@pytest.fixture
def open_adapter(engine_name: str, storage_path: Path):
    """Factory opening a fresh adapter on the same backing file each call.

    Every adapter handed out is closed at teardown.
    """

    opened = []

    def factory():
        adapter = open_storage(engine_name, storage_path)
        opened.append(adapter)
        return adapter

    yield factory

    for adapter in opened:
        adapter.close()


class MemoryAdapter:
    """In-memory adapter recording writes, with switchable write failures."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[dict[str, str]] = []
        self.fail_writes = False
        self.closed = False

    def load_all(self) -> dict[str, str]:
        return dict(self.data)

    def save(self, key: str, raw_value: str) -> None:
        self.save_many({key: raw_value})

    def save_many(self, items: Mapping[str, str]) -> None:
        if self.fail_writes:
            raise StorageWriteError("simulated write failure", path="memory")
        self.writes.append(dict(items))
        self.data.update(items)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_adapter_factory() -> Callable[..., MemoryAdapter]:
    return MemoryAdapter
