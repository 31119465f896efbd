"""Alpha Vantage HTTP client for daily time-series payloads."""

from __future__ import annotations

import logging
from typing import Any

import requests

from smamonitor.data.extract import TIME_SERIES_KEY
from smamonitor.data.rate_limit import RateLimiter
from smamonitor.errors import (
    ApiKeyError,
    InvalidTickerError,
    NetworkError,
    NoDataError,
    RateLimitedError,
)
from smamonitor.state.cache import ResponseCache


class AlphaVantageClient:
    """Cache-first, rate-limited Alpha Vantage client without retries.

    Failures are classified into FetchError subclasses and raised; the caller
    decides whether a later run should try again.
    """

    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        api_key: str,
        cache: ResponseCache,
        rate_limiter: RateLimiter,
        base_url: str = BASE_URL,
        output_size: str = "compact",
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.cache = cache
        self.rate_limiter = rate_limiter
        self.base_url = base_url
        self.output_size = output_size
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger("smamonitor.data.alpha_vantage")

    def fetch(self, ticker: str) -> dict[str, Any]:
        """Return the raw TIME_SERIES_DAILY payload for ticker."""
        symbol = ticker.strip().upper()
        cached = self.cache.lookup(symbol)
        if cached is not None:
            return cached

        self.rate_limiter.wait()
        self.logger.info("Fetching data for %s from Alpha Vantage", symbol)
        payload = self._request(
            params={
                "function": "TIME_SERIES_DAILY",
                "symbol": symbol,
                "outputsize": self.output_size,
                "apikey": self.api_key,
            },
        )
        self._raise_for_payload(symbol, payload)

        self.cache.store_payload(symbol, payload)
        return payload

    def close(self) -> None:
        self.session.close()
        self.cache.close()

    def _request(self, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            self.logger.error("Alpha Vantage request failed for %s: %s", params["symbol"], exc)
            raise NetworkError(f"Failed to fetch data from Alpha Vantage: {exc}") from exc
        except ValueError as exc:
            self.logger.error("Alpha Vantage returned invalid JSON for %s", params["symbol"])
            raise NetworkError(f"Alpha Vantage returned a non-JSON body: {exc}") from exc

        if not isinstance(payload, dict):
            raise NetworkError(
                f"Alpha Vantage returned {type(payload).__name__} instead of a JSON object."
            )
        return payload

    def _raise_for_payload(self, symbol: str, payload: dict[str, Any]) -> None:
        if "Error Message" in payload:
            self.logger.error("Invalid ticker %s: %s", symbol, payload["Error Message"])
            raise InvalidTickerError(f"{symbol}: {payload['Error Message']}")

        if "Note" in payload:
            self.logger.error("Rate limit exceeded: %s", payload["Note"])
            raise RateLimitedError(str(payload["Note"]))

        if "Information" in payload:
            self.logger.error("API key error: %s", payload["Information"])
            raise ApiKeyError(str(payload["Information"]))

        series = payload.get(TIME_SERIES_KEY)
        if not series:
            self.logger.error("No data available for ticker %s", symbol)
            raise NoDataError(f"{symbol}: response has no '{TIME_SERIES_KEY}' data")
