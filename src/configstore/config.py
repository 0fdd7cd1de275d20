"""Environment-driven defaults for the config-store command line."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

ENGINE_NAMES = ("sqlite", "json")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    if not value:
        return None
    return Path(value).expanduser()


class BaseConfig:
    """Configuration resolved from the environment (and a ``.env`` file)."""

    APP_NAME = "configstore"
    DEFAULT_ENGINE = "sqlite"
    DEFAULT_PATH = "settings.db"

    def __init__(self) -> None:
        self.ENGINE = os.getenv("CONFIGSTORE_ENGINE", self.DEFAULT_ENGINE).strip().lower()
        if self.ENGINE not in ENGINE_NAMES:
            raise ValueError(
                f"CONFIGSTORE_ENGINE must be one of {', '.join(ENGINE_NAMES)}; got {self.ENGINE!r}"
            )
        self.PATH = Path(os.getenv("CONFIGSTORE_PATH", self.DEFAULT_PATH)).expanduser()
        self.SCHEMA_PATH = _env_path("CONFIGSTORE_SCHEMA")
        self.AUTOSAVE = _env_bool("CONFIGSTORE_AUTOSAVE", default=True)
        self.DEV_MODE = _env_bool("CONFIGSTORE_DEV_MODE", default=False)
        self.LOG_DIR = _env_path("CONFIGSTORE_LOG_DIR")


__all__ = ["BaseConfig", "ENGINE_NAMES"]
