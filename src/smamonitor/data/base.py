"""Market data client contract."""

from __future__ import annotations

from typing import Any, Protocol


class DailySeriesClient(Protocol):
    """Interface for raw daily time-series retrieval."""

    def fetch(self, ticker: str) -> dict[str, Any]:
        """Return the raw provider payload for ticker or raise a FetchError."""
