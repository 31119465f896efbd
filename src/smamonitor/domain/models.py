"""Core price, indicator, and analysis models."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Self

from smamonitor.errors import ErrorKind, MalformedDataError


class SignalType(StrEnum):
    """Ternary classification attached to every emitted signal."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    WARNING = "warning"


@dataclass(frozen=True)
class PricePoint:
    """Daily close for one trading date."""

    date: date
    close: float


@dataclass(frozen=True)
class PriceSeries:
    """Validated daily closes for one ticker, newest first."""

    ticker: str
    points: tuple[PricePoint, ...]

    def __post_init__(self) -> None:
        ticker = self.ticker.strip().upper()
        if not ticker:
            raise MalformedDataError("ticker must be a non-empty symbol")
        object.__setattr__(self, "ticker", ticker)
        object.__setattr__(self, "points", tuple(self.points))

        if not self.points:
            raise MalformedDataError(f"{ticker}: price series is empty")
        for point in self.points:
            if not (math.isfinite(point.close) and point.close > 0):
                raise MalformedDataError(
                    f"{ticker}: close on {point.date.isoformat()} must be positive, "
                    f"got {point.close!r}"
                )
        for newer, older in zip(self.points, self.points[1:]):
            if newer.date <= older.date:
                raise MalformedDataError(
                    f"{ticker}: dates must be unique and newest first "
                    f"({newer.date.isoformat()} before {older.date.isoformat()})"
                )

    def __len__(self) -> int:
        return len(self.points)

    @property
    def closes(self) -> tuple[float, ...]:
        return tuple(point.close for point in self.points)

    @property
    def latest_date(self) -> date:
        return self.points[0].date

    @property
    def latest_price(self) -> float:
        return self.points[0].close


@dataclass(frozen=True)
class MacdResult:
    """Latest MACD line, signal line, and histogram."""

    macd_line: float
    signal_line: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    """Volatility bands around the middle SMA."""

    upper: float
    middle: float
    lower: float
    bandwidth_pct: float | None


@dataclass(frozen=True)
class Momentum:
    """Percentage price change over one week and one month of trading days."""

    one_week_pct: float | None = None
    one_month_pct: float | None = None


@dataclass(frozen=True)
class IndicatorSet:
    """Indicator values for one price series; None means insufficient data."""

    sma: Mapping[int, float | None]
    rsi: float | None
    macd: MacdResult | None
    bollinger: BollingerBands | None
    momentum: Momentum = field(default_factory=Momentum)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sma", MappingProxyType(dict(sorted(self.sma.items()))))

    def sma_for(self, period: int) -> float | None:
        return self.sma.get(period)

    def to_record(self) -> dict[str, Any]:
        """Convert indicators to a serializable dict."""
        macd = self.macd
        bollinger = self.bollinger
        return {
            "sma": {str(period): value for period, value in self.sma.items()},
            "rsi": self.rsi,
            "macd": None
            if macd is None
            else {
                "macd_line": macd.macd_line,
                "signal_line": macd.signal_line,
                "histogram": macd.histogram,
            },
            "bollinger": None
            if bollinger is None
            else {
                "upper": bollinger.upper,
                "middle": bollinger.middle,
                "lower": bollinger.lower,
                "bandwidth_pct": bollinger.bandwidth_pct,
            },
            "momentum": {
                "one_week_pct": self.momentum.one_week_pct,
                "one_month_pct": self.momentum.one_month_pct,
            },
        }


@dataclass(frozen=True)
class Signal:
    """One qualitative observation about a ticker."""

    text: str
    classification: SignalType


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one ticker in one run: indicators and signals, or an error."""

    ticker: str
    latest_date: date | None = None
    latest_price: float | None = None
    indicators: IndicatorSet | None = None
    signals: tuple[Signal, ...] = ()
    data_point_count: int = 0
    error: ErrorKind | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "signals", tuple(self.signals))
        if (self.indicators is None) == (self.error is None):
            raise ValueError("AnalysisResult needs exactly one of indicators or error")
        if self.error is not None and self.signals:
            raise ValueError("failed AnalysisResult must not carry signals")

    @classmethod
    def success(
        cls,
        series: PriceSeries,
        indicators: IndicatorSet,
        signals: list[Signal],
    ) -> Self:
        return cls(
            ticker=series.ticker,
            latest_date=series.latest_date,
            latest_price=series.latest_price,
            indicators=indicators,
            signals=tuple(signals),
            data_point_count=len(series),
        )

    @classmethod
    def failure(cls, ticker: str, kind: ErrorKind, message: str | None = None) -> Self:
        return cls(ticker=ticker.strip().upper(), error=kind, error_message=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_record(self) -> dict[str, Any]:
        """Convert result to serializable dict."""
        return {
            "ticker": self.ticker,
            "latest_date": self.latest_date.isoformat() if self.latest_date else None,
            "latest_price": self.latest_price,
            "indicators": self.indicators.to_record() if self.indicators else None,
            "signals": [
                {"text": signal.text, "classification": signal.classification.value}
                for signal in self.signals
            ],
            "data_point_count": self.data_point_count,
            "error": self.error.value if self.error else None,
            "error_message": self.error_message,
        }
