"""Storage adapter protocol."""

from __future__ import annotations

from typing import Mapping, Protocol


class StorageAdapter(Protocol):
    """Persistence boundary for raw key/value pairs.

    Values cross this boundary as strings; typing them is the store's job.
    """

    def load_all(self) -> dict[str, str]:
        """Return every persisted pair, in the backend's stable order."""
        ...

    def save(self, key: str, raw_value: str) -> None:
        """Persist one pair, replacing any previous value for the key."""
        ...

    def save_many(self, items: Mapping[str, str]) -> None:
        """Persist several pairs as a single unit."""
        ...

    def close(self) -> None:
        """Release the backing resource."""
        ...
