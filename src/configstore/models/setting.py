"""Typed setting values and the schema records that describe them."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_BOOL_LITERALS = {"true": True, "false": False}
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class SettingKind(str, Enum):
    """Variants a setting value can take."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    NONE = "none"


_PYTHON_TYPES: dict[SettingKind, tuple[type, ...]] = {
    SettingKind.BOOL: (bool,),
    SettingKind.INT: (int,),
    SettingKind.FLOAT: (float,),
    SettingKind.STRING: (str,),
    SettingKind.NONE: (type(None),),
}


def _format_float(value: float) -> str:
    """Render a finite float positionally, always with a decimal point.

    The digits are the shortest ones that reproduce ``value`` (``repr``), so
    parsing the output yields the same double.
    """

    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


@dataclass(frozen=True)
class Setting:
    """A single configuration value tagged with its kind.

    ``Setting.none()`` is the empty sentinel handed out by lookups that find
    neither an override, a default nor a fallback. It is never produced by
    :meth:`from_string`.
    """

    kind: SettingKind
    value: Any = None

    def __post_init__(self) -> None:
        expected = _PYTHON_TYPES[self.kind]
        # bool is an int subclass; keep the two variants apart.
        if self.kind is SettingKind.INT and isinstance(self.value, bool):
            raise ValueError("Integer setting cannot hold a boolean")
        if not isinstance(self.value, expected):
            raise ValueError(f"{self.kind.value} setting cannot hold {type(self.value).__name__}")
        if self.kind is SettingKind.INT and not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Integer setting out of 64-bit range: {self.value}")
        if self.kind is SettingKind.FLOAT and not math.isfinite(self.value):
            raise ValueError(f"Float setting must be finite: {self.value}")

    # Constructors ---------------------------------------------------------

    @classmethod
    def bool_(cls, value: bool) -> "Setting":
        return cls(SettingKind.BOOL, value)

    @classmethod
    def int_(cls, value: int) -> "Setting":
        return cls(SettingKind.INT, value)

    @classmethod
    def float_(cls, value: float) -> "Setting":
        if isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        return cls(SettingKind.FLOAT, value)

    @classmethod
    def string(cls, value: str) -> "Setting":
        return cls(SettingKind.STRING, value)

    @classmethod
    def none(cls) -> "Setting":
        return _NONE_SETTING

    @classmethod
    def from_value(cls, value: Any) -> "Setting":
        """Wrap a plain Python value in the matching variant."""

        if value is None:
            return cls.none()
        if isinstance(value, bool):
            return cls.bool_(value)
        if isinstance(value, int):
            return cls.int_(value)
        if isinstance(value, float):
            return cls.float_(value)
        if isinstance(value, str):
            return cls.string(value)
        raise TypeError(f"Unsupported setting value type: {type(value).__name__}")

    @classmethod
    def from_string(cls, raw: str) -> "Setting":
        """Parse external input into the most specific variant.

        Attempts a boolean literal, then a 64-bit integer, then a finite
        float, and falls back to a string. Never raises for ``str`` input.
        """

        if raw in _BOOL_LITERALS:
            return cls.bool_(_BOOL_LITERALS[raw])
        # int() refuses very long digit strings; anything past 19 digits is out of range anyway.
        if _INT_PATTERN.fullmatch(raw) and len(raw.lstrip("+-").lstrip("0")) <= 19:
            number = int(raw)
            if INT64_MIN <= number <= INT64_MAX:
                return cls.int_(number)
        if _FLOAT_PATTERN.fullmatch(raw):
            number = float(raw)
            if math.isfinite(number):
                return cls.float_(number)
        return cls.string(raw)

    # Rendering ------------------------------------------------------------

    def to_string(self) -> str:
        if self.kind is SettingKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is SettingKind.INT:
            return str(self.value)
        if self.kind is SettingKind.FLOAT:
            return _format_float(self.value)
        if self.kind is SettingKind.STRING:
            return self.value
        return ""

    def __str__(self) -> str:
        return self.to_string()

    @property
    def is_none(self) -> bool:
        return self.kind is SettingKind.NONE


_NONE_SETTING = Setting(SettingKind.NONE, None)


@dataclass(frozen=True)
class SettingInfo:
    """Schema entry: a known key with its default value and description."""

    key: str
    default: Setting
    description: str = ""


__all__ = ["INT64_MAX", "INT64_MIN", "Setting", "SettingInfo", "SettingKind"]
