"""Cache store contract and in-memory implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class CacheEntry:
    """Raw provider payload captured for one ticker."""

    key: str
    stored_at: float
    payload: dict[str, Any]


class CacheStore(Protocol):
    """Key-value persistence for cached provider responses."""

    def get(self, key: str) -> CacheEntry | None:
        """Return the stored entry, or None when absent.

        Raises CacheCorruptedError when the stored payload cannot be decoded.
        """

    def set(self, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous one for the same key.

        Raises CacheStoreError when the entry cannot be persisted.
        """

    def delete(self, key: str) -> None:
        """Remove the entry for key if present. Raises CacheStoreError on failure."""

    def close(self) -> None:
        """Close persistence resources."""


class InMemoryCacheStore:
    """Process-local cache store."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
