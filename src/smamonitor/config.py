"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from smamonitor.analysis.indicators import IndicatorParams
from smamonitor.analysis.signals import SignalParams
from smamonitor.errors import ConfigError

DEFAULT_TICKERS = ["CRWD", "GOOG", "MSFT", "NVDA"]
CACHE_BACKENDS = {"sqlite", "memory"}
OUTPUT_SIZES = {"compact", "full"}


def parse_tickers(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated tickers, upper-cased and de-duplicated in order."""
    fallback = default if default is not None else DEFAULT_TICKERS
    if not value:
        return list(fallback)
    tickers: list[str] = []
    seen: set[str] = set()
    for item in value.split(","):
        ticker = item.strip().upper()
        if not ticker or ticker in seen:
            continue
        seen.add(ticker)
        tickers.append(ticker)
    return tickers or list(fallback)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip())


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    api_key: str = ""
    tickers: list[str] = field(default_factory=lambda: list(DEFAULT_TICKERS))
    base_url: str = "https://www.alphavantage.co/query"
    output_size: str = "compact"
    request_timeout_seconds: float = 15.0
    rate_limit_delay_seconds: float = 12.0
    cache_ttl_seconds: float = 4 * 60 * 60
    cache_backend: str = "sqlite"
    cache_db_path: str = "state/smamonitor_cache.db"
    sma_short_period: int = 50
    sma_long_period: int = 100
    rsi_period: int = 14
    bollinger_period: int = 20
    macd_min_points: int = 35
    stale_after_days: int = 3
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables (and a .env file if present)."""
        load_dotenv()
        try:
            raw = cls(
                api_key=str(os.getenv("ALPHA_VANTAGE_API_KEY", "")).strip(),
                tickers=parse_tickers(os.getenv("TICKERS")),
                base_url=str(
                    os.getenv("ALPHA_VANTAGE_BASE_URL", "https://www.alphavantage.co/query")
                ).strip(),
                output_size=str(os.getenv("OUTPUT_SIZE", "compact")).strip().lower(),
                request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", 15.0),
                rate_limit_delay_seconds=_env_float("RATE_LIMIT_DELAY_SECONDS", 12.0),
                cache_ttl_seconds=_env_float("CACHE_TTL_SECONDS", 4 * 60 * 60),
                cache_backend=str(os.getenv("CACHE_BACKEND", "sqlite")).strip().lower(),
                cache_db_path=str(
                    os.getenv("CACHE_DB_PATH", "state/smamonitor_cache.db")
                ).strip(),
                sma_short_period=_env_int("SMA_SHORT_PERIOD", 50),
                sma_long_period=_env_int("SMA_LONG_PERIOD", 100),
                rsi_period=_env_int("RSI_PERIOD", 14),
                bollinger_period=_env_int("BOLLINGER_PERIOD", 20),
                macd_min_points=_env_int("MACD_MIN_POINTS", 35),
                stale_after_days=_env_int("STALE_AFTER_DAYS", 3),
                log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
                log_file=str(os.getenv("LOG_FILE", "")).strip() or None,
            )
        except ValueError as exc:
            raise ConfigError(
                "One or more numeric environment variables are invalid. "
                "Check the *_SECONDS, *_PERIOD, MACD_MIN_POINTS and STALE_AFTER_DAYS values."
            ) from exc
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def indicator_params(self) -> IndicatorParams:
        return IndicatorParams(
            sma_periods=(self.sma_short_period, self.sma_long_period),
            rsi_period=self.rsi_period,
            bollinger_period=self.bollinger_period,
            macd_min_points=self.macd_min_points,
        )

    def signal_params(self) -> SignalParams:
        return SignalParams(stale_after_days=self.stale_after_days)

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.tickers:
            raise ConfigError("At least one ticker is required (TICKERS).")
        if self.output_size not in OUTPUT_SIZES:
            raise ConfigError("OUTPUT_SIZE must be one of: compact, full.")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("REQUEST_TIMEOUT_SECONDS must be positive.")
        if self.rate_limit_delay_seconds < 0:
            raise ConfigError("RATE_LIMIT_DELAY_SECONDS cannot be negative.")
        if self.cache_ttl_seconds <= 0:
            raise ConfigError("CACHE_TTL_SECONDS must be positive.")
        if self.cache_backend not in CACHE_BACKENDS:
            raise ConfigError("CACHE_BACKEND must be one of: sqlite, memory.")
        if self.cache_backend == "sqlite" and not self.cache_db_path:
            raise ConfigError("CACHE_DB_PATH is required when CACHE_BACKEND=sqlite.")
        if self.sma_short_period <= 0 or self.sma_long_period <= 0:
            raise ConfigError("SMA periods must be positive integers.")
        if self.sma_short_period >= self.sma_long_period:
            raise ConfigError(
                "SMA_SHORT_PERIOD must be less than SMA_LONG_PERIOD (example: 50 and 100)."
            )
        if self.rsi_period <= 0 or self.bollinger_period <= 0:
            raise ConfigError("RSI_PERIOD and BOLLINGER_PERIOD must be positive integers.")
        if self.macd_min_points <= 0:
            raise ConfigError("MACD_MIN_POINTS must be a positive integer.")
        if self.stale_after_days < 0:
            raise ConfigError("STALE_AFTER_DAYS cannot be negative.")
        return self

    def require_api_key(self) -> None:
        """Raise when no Alpha Vantage key is configured."""
        if not self.api_key:
            raise ConfigError(
                "Missing required environment variable: ALPHA_VANTAGE_API_KEY. "
                "Update your .env and try again."
            )
