"""Load a settings schema from a JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from ..models.setting import Setting, SettingInfo


def load_schema(path: Path) -> list[SettingInfo]:
    """Read schema entries from ``path``.

    Expected layout::

        {"network.timeout": {"default": "30", "description": "Seconds"}}

    Defaults are parsed with :meth:`Setting.from_string`, the same coercion
    applied to persisted values. ``description`` is optional.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the file is not valid JSON or does not match the layout.
    """
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Schema file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Schema file {path} must contain a JSON object")

    entries: list[SettingInfo] = []
    for key, spec in data.items():
        if not isinstance(spec, dict) or not isinstance(spec.get("default"), str):
            raise ValueError(f"Schema entry '{key}' needs a string 'default'")
        description = spec.get("description", "")
        if not isinstance(description, str):
            raise ValueError(f"Schema entry '{key}' has a non-string 'description'")
        entries.append(SettingInfo(key, Setting.from_string(spec["default"]), description))
    return entries
