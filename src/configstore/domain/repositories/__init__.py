"""Repository protocol definitions for domain layer."""

from .storage import StorageAdapter

__all__ = ["StorageAdapter"]
