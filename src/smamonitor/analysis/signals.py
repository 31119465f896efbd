"""Map indicator values to ordered bullish/bearish/warning signals."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime

from smamonitor.domain.models import (
    BollingerBands,
    IndicatorSet,
    PriceSeries,
    Signal,
    SignalType,
)


@dataclass(frozen=True)
class SignalParams:
    """Thresholds used by the classifier."""

    stale_after_days: int = 3
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0

    def __post_init__(self) -> None:
        if self.stale_after_days < 0:
            raise ValueError("stale_after_days cannot be negative")
        if not 0 <= self.rsi_oversold < self.rsi_overbought <= 100:
            raise ValueError("RSI thresholds must satisfy 0 <= oversold < overbought <= 100")


def classify(
    series: PriceSeries,
    indicators: IndicatorSet,
    as_of: datetime | None = None,
    params: SignalParams | None = None,
) -> list[Signal]:
    """Return signals in a fixed order.

    Staleness, then price against each SMA (shortest period first), the
    golden/death cross, RSI, MACD, and Bollinger Bands. Indicators that are
    None emit nothing, except SMAs which emit an insufficient-data warning.
    """
    params = params or SignalParams()
    as_of = as_of or datetime.now(tz=UTC)
    price = series.latest_price

    signals: list[Signal] = []
    stale = _staleness_signal(series, as_of, params.stale_after_days)
    if stale is not None:
        signals.append(stale)

    for period, value in indicators.sma.items():
        signals.append(_sma_signal(price, period, value, len(series)))

    cross = _cross_signal(indicators)
    if cross is not None:
        signals.append(cross)

    if indicators.rsi is not None:
        signals.append(_rsi_signal(indicators.rsi, params))

    if indicators.macd is not None:
        macd = indicators.macd
        if macd.histogram > 0:
            signals.append(
                Signal(
                    f"MACD {macd.macd_line:.3f} above signal ({macd.signal_line:.3f})"
                    " - Bullish momentum",
                    SignalType.BULLISH,
                )
            )
        else:
            signals.append(
                Signal(
                    f"MACD {macd.macd_line:.3f} below signal ({macd.signal_line:.3f})"
                    " - Bearish momentum",
                    SignalType.BEARISH,
                )
            )

    if indicators.bollinger is not None:
        signals.append(_bollinger_signal(price, indicators.bollinger))

    return signals


def days_old(series: PriceSeries, as_of: datetime) -> int:
    """Whole days between the latest close (UTC midnight) and ``as_of``."""
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=UTC)
    latest = datetime(
        series.latest_date.year,
        series.latest_date.month,
        series.latest_date.day,
        tzinfo=UTC,
    )
    return (as_of - latest).days


def _staleness_signal(
    series: PriceSeries,
    as_of: datetime,
    stale_after_days: int,
) -> Signal | None:
    age = days_old(series, as_of)
    if age <= stale_after_days:
        return None
    return Signal(
        f"Warning: Data is {age} days old. Market may be closed or data is stale.",
        SignalType.WARNING,
    )


def _sma_signal(price: float, period: int, value: float | None, available: int) -> Signal:
    if value is None:
        return Signal(
            f"Insufficient data for {period}-day SMA (need {period} days, have {available})",
            SignalType.WARNING,
        )
    deviation = abs((price - value) / value * 100)
    if price > value:
        return Signal(
            f"Price is {deviation:.2f}% above {period}-day SMA (${value:.2f}) - Bullish",
            SignalType.BULLISH,
        )
    return Signal(
        f"Price is {deviation:.2f}% below {period}-day SMA (${value:.2f}) - Bearish",
        SignalType.BEARISH,
    )


def _cross_signal(indicators: IndicatorSet) -> Signal | None:
    periods = list(indicators.sma)
    if len(periods) < 2:
        return None
    short_period, long_period = periods[0], periods[-1]
    short_sma = indicators.sma[short_period]
    long_sma = indicators.sma[long_period]
    if short_sma is None or long_sma is None:
        return None
    if short_sma > long_sma:
        return Signal(
            f"Golden Cross: {short_period}-day SMA is above {long_period}-day SMA - Bullish",
            SignalType.BULLISH,
        )
    return Signal(
        f"Death Cross: {short_period}-day SMA is below {long_period}-day SMA - Bearish",
        SignalType.BEARISH,
    )


def _rsi_signal(value: float, params: SignalParams) -> Signal:
    if value > params.rsi_overbought:
        return Signal(f"RSI {value:.1f} - Overbought", SignalType.BEARISH)
    if value < params.rsi_oversold:
        return Signal(f"RSI {value:.1f} - Oversold", SignalType.BULLISH)
    return Signal(f"RSI {value:.1f} - Neutral", SignalType.WARNING)


def _bollinger_signal(price: float, bands: BollingerBands) -> Signal:
    if math.isclose(bands.upper, bands.lower, rel_tol=1e-12):
        return Signal(
            f"Price at flat Bollinger Bands (${bands.middle:.2f}), no volatility in window",
            SignalType.WARNING,
        )
    if price > bands.upper:
        return Signal(
            f"Price above upper Bollinger Band (${bands.upper:.2f}) - Overbought",
            SignalType.BEARISH,
        )
    if price < bands.lower:
        return Signal(
            f"Price below lower Bollinger Band (${bands.lower:.2f}) - Oversold",
            SignalType.BULLISH,
        )
    position = (price - bands.lower) / (bands.upper - bands.lower) * 100
    return Signal(
        f"Price at {position:.0f}% within Bollinger Bands "
        f"(${bands.lower:.2f} - ${bands.upper:.2f})",
        SignalType.WARNING,
    )
