"""Value types and SQLModel table exports."""

from .setting import Setting, SettingInfo, SettingKind
from .stored_setting import StoredSetting

__all__ = [
    "Setting",
    "SettingInfo",
    "SettingKind",
    "StoredSetting",
]
