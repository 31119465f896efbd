"""Runtime wiring and the per-ticker analysis loop."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from smamonitor.analysis.indicators import IndicatorParams, compute_indicators
from smamonitor.analysis.signals import SignalParams, classify
from smamonitor.config import Settings
from smamonitor.data.alpha_vantage import AlphaVantageClient
from smamonitor.data.base import DailySeriesClient
from smamonitor.data.extract import extract_price_series
from smamonitor.data.rate_limit import RateLimiter
from smamonitor.domain.models import AnalysisResult
from smamonitor.errors import CacheStoreError, ErrorKind, MonitorError
from smamonitor.logging.logger import RunLogger
from smamonitor.state.cache import ResponseCache
from smamonitor.state.sqlite_store import SqliteCacheStore
from smamonitor.state.store import CacheStore, InMemoryCacheStore


class Monitor:
    """Fetch, compute, and classify tickers one at a time."""

    def __init__(
        self,
        client: DailySeriesClient,
        indicator_params: IndicatorParams | None = None,
        signal_params: SignalParams | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=UTC),
        run_logger: RunLogger | None = None,
    ) -> None:
        self.client = client
        self.indicator_params = indicator_params or IndicatorParams()
        self.signal_params = signal_params or SignalParams()
        self.clock = clock
        self.run_logger = run_logger or RunLogger()
        self.logger = logging.getLogger("smamonitor.runtime")

    def run(self, tickers: list[str]) -> list[AnalysisResult]:
        """Return exactly one result per ticker, in input order.

        Calls are strictly sequential so the client's shared rate limiter
        sees every outbound request. A failing ticker never aborts the run.
        """
        self.run_logger.run_started(tickers)
        results: list[AnalysisResult] = []
        for ticker in tickers:
            result = self._run_ticker(ticker)
            self.run_logger.result(result)
            results.append(result)
        self.run_logger.run_finished(results)
        return results

    def analyze(self, ticker: str, payload: Mapping[str, Any]) -> AnalysisResult:
        """Extract, compute, and classify a payload already fetched."""
        series = extract_price_series(payload, ticker)
        indicators = compute_indicators(series, self.indicator_params)
        signals = classify(series, indicators, as_of=self.clock(), params=self.signal_params)
        return AnalysisResult.success(series, indicators, signals)

    def _run_ticker(self, ticker: str) -> AnalysisResult:
        symbol = ticker.strip().upper()
        try:
            payload = self.client.fetch(symbol)
            return self.analyze(symbol, payload)
        except MonitorError as exc:
            self.logger.error("%s: %s", symbol, exc)
            return AnalysisResult.failure(symbol, exc.kind, str(exc))
        except Exception as exc:  # pragma: no cover - safety net
            self.logger.exception("%s: unexpected error: %s", symbol, exc)
            return AnalysisResult.failure(symbol, ErrorKind.INTERNAL_ERROR, str(exc))


def build_cache_store(settings: Settings) -> CacheStore:
    """Factory for response cache stores.

    An unusable SQLite database falls back to an in-memory store for this run.
    """
    if settings.cache_backend == "sqlite":
        try:
            return SqliteCacheStore(settings.cache_db_path)
        except CacheStoreError as exc:
            logging.getLogger("smamonitor.runtime").warning(
                "Cache database unavailable, caching in memory for this run: %s", exc
            )
    return InMemoryCacheStore()


def build_client(settings: Settings) -> AlphaVantageClient:
    """Wire the Alpha Vantage client with its cache and rate limiter."""
    cache = ResponseCache(
        store=build_cache_store(settings),
        ttl_seconds=settings.cache_ttl_seconds,
    )
    return AlphaVantageClient(
        api_key=settings.api_key,
        cache=cache,
        rate_limiter=RateLimiter(settings.rate_limit_delay_seconds),
        base_url=settings.base_url,
        output_size=settings.output_size,
        timeout=settings.request_timeout_seconds,
    )


def build_monitor(settings: Settings, client: DailySeriesClient) -> Monitor:
    return Monitor(
        client=client,
        indicator_params=settings.indicator_params(),
        signal_params=settings.signal_params(),
    )


def run(settings: Settings) -> list[AnalysisResult]:
    """Run one monitoring pass for the configured tickers."""
    client = build_client(settings)
    try:
        return build_monitor(settings, client).run(settings.tickers)
    finally:
        client.close()
