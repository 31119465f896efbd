"""Custom exceptions and error kinds shared across the monitor."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Closed set of per-ticker failure kinds surfaced to consumers."""

    NETWORK_ERROR = "NetworkError"
    INVALID_TICKER = "InvalidTicker"
    RATE_LIMITED = "RateLimited"
    API_KEY_ERROR = "ApiKeyError"
    NO_DATA = "NoData"
    MALFORMED_DATA = "MalformedData"
    INTERNAL_ERROR = "InternalError"


class MonitorError(Exception):
    """Base exception for all app-specific errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class ConfigError(MonitorError):
    """Raised when environment or CLI configuration is invalid or missing."""


class FetchError(MonitorError):
    """Raised when market data retrieval fails."""


class NetworkError(FetchError):
    """Transport failure, non-2xx status, or an undecodable body."""

    kind = ErrorKind.NETWORK_ERROR


class InvalidTickerError(FetchError):
    """Provider does not know the requested symbol."""

    kind = ErrorKind.INVALID_TICKER


class RateLimitedError(FetchError):
    """Provider quota exhausted."""

    kind = ErrorKind.RATE_LIMITED


class ApiKeyError(FetchError):
    """Provider rejected the API key or its entitlement."""

    kind = ErrorKind.API_KEY_ERROR


class NoDataError(FetchError):
    """Symbol recognized but the daily time series is missing or empty."""

    kind = ErrorKind.NO_DATA


class MalformedDataError(MonitorError):
    """Provider payload violates the expected time-series contract."""

    kind = ErrorKind.MALFORMED_DATA


class CacheStoreError(MonitorError):
    """A cache store could not be opened, read, or written."""


class CacheCorruptedError(CacheStoreError):
    """A cached payload could not be decoded."""


_EXPLANATIONS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_TICKER: (
        'The ticker symbol "{ticker}" was not found. '
        "Please check the symbol and try again."
    ),
    ErrorKind.RATE_LIMITED: (
        "Too many requests. Alpha Vantage free tier allows 25 requests per day. "
        "Please wait and try again later."
    ),
    ErrorKind.API_KEY_ERROR: (
        "There is an issue with the API key configuration. "
        "Check that ALPHA_VANTAGE_API_KEY holds a valid Alpha Vantage key."
    ),
    ErrorKind.NO_DATA: (
        'No data is available for "{ticker}". '
        "This ticker may not be supported by Alpha Vantage."
    ),
    ErrorKind.NETWORK_ERROR: (
        "Failed to connect to Alpha Vantage. "
        "Please check your internet connection and try again."
    ),
    ErrorKind.MALFORMED_DATA: (
        'Alpha Vantage returned data for "{ticker}" in an unexpected shape.'
    ),
    ErrorKind.INTERNAL_ERROR: (
        'An unexpected error occurred while analyzing "{ticker}".'
    ),
}


def explain(kind: ErrorKind, ticker: str) -> str:
    """Return a human-readable explanation for an error kind."""
    return _EXPLANATIONS[kind].format(ticker=ticker.upper())
