"""Time-bounded response cache on top of a cache store."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from smamonitor.errors import CacheCorruptedError, CacheStoreError
from smamonitor.state.store import CacheEntry, CacheStore


class ResponseCache:
    """Serve provider payloads captured less than ``ttl_seconds`` ago."""

    def __init__(
        self,
        store: CacheStore,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logging.getLogger("smamonitor.state.cache")

    def lookup(self, ticker: str) -> dict[str, Any] | None:
        """Return a fresh cached payload, evicting expired or corrupt entries.

        Store failures are logged and treated as a miss.
        """
        key = self._key(ticker)
        try:
            entry = self.store.get(key)
        except CacheCorruptedError as exc:
            self.logger.warning("Evicting corrupt cache entry for %s: %s", key, exc)
            self.evict(key)
            return None
        except CacheStoreError as exc:
            self.logger.warning("Cache unavailable for %s: %s", key, exc)
            return None

        if entry is None:
            return None

        age = self.clock() - entry.stored_at
        if age < self.ttl_seconds:
            self.logger.info("Using cached data for %s (age %.0fs)", key, age)
            return entry.payload

        self.logger.info("Cache expired for %s (age %.0fs)", key, age)
        self.evict(key)
        return None

    def store_payload(self, ticker: str, payload: dict[str, Any]) -> bool:
        """Cache payload for ticker; return False when the store rejected it."""
        key = self._key(ticker)
        try:
            self.store.set(CacheEntry(key=key, stored_at=self.clock(), payload=payload))
        except CacheStoreError as exc:
            self.logger.warning("Could not cache data for %s: %s", key, exc)
            return False
        self.logger.debug("Cached data for %s", key)
        return True

    def evict(self, ticker: str) -> None:
        key = self._key(ticker)
        try:
            self.store.delete(key)
        except CacheStoreError as exc:
            self.logger.warning("Could not evict cache entry for %s: %s", key, exc)

    def close(self) -> None:
        self.store.close()

    @staticmethod
    def _key(ticker: str) -> str:
        return ticker.strip().upper()
