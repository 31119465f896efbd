from __future__ import annotations

import pytest

from smamonitor.config import DEFAULT_TICKERS, Settings, parse_tickers
from smamonitor.errors import ConfigError

ENV_KEYS = [
    "ALPHA_VANTAGE_API_KEY",
    "TICKERS",
    "ALPHA_VANTAGE_BASE_URL",
    "OUTPUT_SIZE",
    "REQUEST_TIMEOUT_SECONDS",
    "RATE_LIMIT_DELAY_SECONDS",
    "CACHE_TTL_SECONDS",
    "CACHE_BACKEND",
    "CACHE_DB_PATH",
    "SMA_SHORT_PERIOD",
    "SMA_LONG_PERIOD",
    "RSI_PERIOD",
    "BOLLINGER_PERIOD",
    "MACD_MIN_POINTS",
    "STALE_AFTER_DAYS",
    "LOG_LEVEL",
    "LOG_FILE",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("smamonitor.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_parse_tickers_normalizes_and_dedupes() -> None:
    assert parse_tickers(" msft, nvda,,MSFT ,goog") == ["MSFT", "NVDA", "GOOG"]
    assert parse_tickers(None) == DEFAULT_TICKERS
    assert parse_tickers(" , ") == DEFAULT_TICKERS


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.api_key == ""
    assert settings.tickers == ["CRWD", "GOOG", "MSFT", "NVDA"]
    assert settings.rate_limit_delay_seconds == 12.0
    assert settings.cache_ttl_seconds == 4 * 60 * 60
    assert settings.cache_backend == "sqlite"
    assert settings.output_size == "compact"
    assert settings.log_file is None


def test_environment_values_are_applied(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", " secret ")
    monkeypatch.setenv("TICKERS", "aapl,tsla")
    monkeypatch.setenv("CACHE_BACKEND", "Memory")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "600")
    monkeypatch.setenv("SMA_SHORT_PERIOD", "20")
    monkeypatch.setenv("SMA_LONG_PERIOD", "200")
    monkeypatch.setenv("STALE_AFTER_DAYS", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.api_key == "secret"
    assert settings.tickers == ["AAPL", "TSLA"]
    assert settings.cache_backend == "memory"
    assert settings.cache_ttl_seconds == 600.0
    assert settings.log_level == "DEBUG"
    assert settings.indicator_params().sma_periods == (20, 200)
    assert settings.signal_params().stale_after_days == 5


def test_non_numeric_environment_value_is_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("RATE_LIMIT_DELAY_SECONDS", "soon")

    with pytest.raises(ConfigError, match="numeric environment variables"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"sma_short_period": 100, "sma_long_period": 50}, "SMA_SHORT_PERIOD must be less"),
        ({"cache_ttl_seconds": 0}, "CACHE_TTL_SECONDS"),
        ({"rate_limit_delay_seconds": -1}, "RATE_LIMIT_DELAY_SECONDS"),
        ({"cache_backend": "redis"}, "CACHE_BACKEND"),
        ({"output_size": "huge"}, "OUTPUT_SIZE"),
        ({"tickers": []}, "At least one ticker"),
    ],
)
def test_invalid_settings_are_rejected(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        Settings().with_overrides(**overrides)


def test_missing_api_key_is_reported() -> None:
    with pytest.raises(ConfigError, match="ALPHA_VANTAGE_API_KEY"):
        Settings().require_api_key()

    Settings(api_key="demo").require_api_key()
