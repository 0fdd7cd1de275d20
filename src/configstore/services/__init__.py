"""Service module exports."""

from .config_store import ConfigStore, KeyMatches
from .schema_loader import load_schema

__all__ = ["ConfigStore", "KeyMatches", "load_schema"]
