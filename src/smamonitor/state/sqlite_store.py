"""SQLite cache store so cached responses survive between runs."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from smamonitor.errors import CacheCorruptedError, CacheStoreError
from smamonitor.state.store import CacheEntry


class SqliteCacheStore:
    """SQLite-backed implementation of the response cache store.

    sqlite3 failures surface as CacheStoreError, and unreadable rows or
    database pages as CacheCorruptedError.
    """

    def __init__(self, db_path: str) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(path)
        self.connection.row_factory = sqlite3.Row
        try:
            self._initialize_schema()
        except sqlite3.Error as exc:
            self.connection.close()
            raise CacheStoreError(f"cannot open cache database {db_path}: {exc}") from exc

    def get(self, key: str) -> CacheEntry | None:
        try:
            row = self.connection.execute(
                """
                SELECT cache_key, stored_at, payload
                FROM response_cache
                WHERE cache_key = ?
                """,
                (key,),
            ).fetchone()
        except sqlite3.DatabaseError as exc:
            raise CacheCorruptedError(f"cached entry for {key} is unreadable: {exc}") from exc
        if row is None:
            return None
        try:
            payload = json.loads(row["payload"])
            stored_at = float(row["stored_at"])
        except (TypeError, ValueError) as exc:
            raise CacheCorruptedError(f"cached payload for {key} is unreadable: {exc}") from exc
        if not isinstance(payload, dict):
            raise CacheCorruptedError(f"cached payload for {key} is not a JSON object")
        return CacheEntry(key=str(row["cache_key"]), stored_at=stored_at, payload=payload)

    def set(self, entry: CacheEntry) -> None:
        try:
            self.connection.execute(
                """
                INSERT OR REPLACE INTO response_cache(cache_key, stored_at, payload)
                VALUES(?, ?, ?)
                """,
                (entry.key, entry.stored_at, json.dumps(entry.payload, sort_keys=True)),
            )
            self.connection.commit()
        except sqlite3.Error as exc:
            raise CacheStoreError(f"cannot write cache entry for {entry.key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.connection.execute(
                "DELETE FROM response_cache WHERE cache_key = ?",
                (key,),
            )
            self.connection.commit()
        except sqlite3.Error as exc:
            raise CacheStoreError(f"cannot delete cache entry for {key}: {exc}") from exc

    def close(self) -> None:
        self.connection.close()

    def _initialize_schema(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS response_cache(
                cache_key TEXT PRIMARY KEY,
                stored_at REAL NOT NULL,
                payload TEXT NOT NULL
            )
            """
        )
        self.connection.commit()
