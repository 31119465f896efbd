"""Technical indicators over newest-first daily closes.

Every function takes closes ordered newest first, copies them before any
reordering, and returns None when the series is too short for the requested
window. None is never replaced by zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from smamonitor.domain.models import (
    BollingerBands,
    IndicatorSet,
    MacdResult,
    Momentum,
    PriceSeries,
)


@dataclass(frozen=True)
class IndicatorParams:
    """Window lengths and conventions used to build an IndicatorSet."""

    sma_periods: tuple[int, ...] = (50, 100)
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    macd_min_points: int = 35
    bollinger_period: int = 20
    bollinger_num_std: float = 2.0
    momentum_week_offset: int = 5
    momentum_month_offset: int = 21

    def __post_init__(self) -> None:
        if not self.sma_periods:
            raise ValueError("sma_periods must name at least one period")
        windows = (
            *self.sma_periods,
            self.rsi_period,
            self.macd_fast,
            self.macd_slow,
            self.macd_signal,
            self.bollinger_period,
            self.momentum_week_offset,
            self.momentum_month_offset,
        )
        if any(window <= 0 for window in windows):
            raise ValueError("indicator windows must be positive integers")
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be less than macd_slow")
        if self.bollinger_num_std <= 0:
            raise ValueError("bollinger_num_std must be positive")
        object.__setattr__(self, "sma_periods", tuple(sorted(set(self.sma_periods))))


def sma(prices: Sequence[float], period: int) -> float | None:
    """Mean of the newest ``period`` closes."""
    if period <= 0:
        raise ValueError("period must be positive")
    if len(prices) < period:
        return None
    return float(pd.Series(prices[:period], dtype="float64").mean())


def ema_chain(oldest_first: Sequence[float], period: int) -> list[float | None]:
    """EMA aligned to the input, seeded with the SMA of the first ``period`` values.

    Input must be ordered oldest first. Positions before the seed are None;
    an input shorter than ``period`` yields an empty list.
    """
    if period <= 0:
        raise ValueError("period must be positive")
    values = [float(value) for value in oldest_first]
    if len(values) < period:
        return []

    k = 2 / (period + 1)
    chain: list[float | None] = [None] * len(values)
    previous = float(pd.Series(values[:period], dtype="float64").mean())
    chain[period - 1] = previous
    for index in range(period, len(values)):
        previous = values[index] * k + previous * (1 - k)
        chain[index] = previous
    return chain


def rsi(prices: Sequence[float], period: int = 14) -> float | None:
    """Relative Strength Index with Wilder smoothing, bounded to [0, 100]."""
    if period <= 0:
        raise ValueError("period must be positive")
    if len(prices) < period + 1:
        return None

    oldest_first = pd.Series(list(reversed(prices)), dtype="float64")
    changes = oldest_first.diff().iloc[1:].reset_index(drop=True)
    gains = changes.clip(lower=0.0)
    losses = (-changes).clip(lower=0.0)

    avg_gain = float(gains.iloc[:period].mean())
    avg_loss = float(losses.iloc[:period].mean())
    for gain, loss in zip(gains.iloc[period:], losses.iloc[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


def macd(
    prices: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
    min_points: int = 35,
) -> MacdResult | None:
    """Latest MACD line, its signal-line EMA, and the histogram between them."""
    if len(prices) < min_points:
        return None

    oldest_first = list(reversed(prices))
    fast_chain = ema_chain(oldest_first, fast)
    slow_chain = ema_chain(oldest_first, slow)
    if not fast_chain or not slow_chain:
        return None

    macd_values = [
        fast_value - slow_value
        for fast_value, slow_value in zip(fast_chain, slow_chain)
        if fast_value is not None and slow_value is not None
    ]
    if len(macd_values) < signal:
        return None

    signal_line = ema_chain(macd_values, signal)[-1]
    if signal_line is None:
        return None
    macd_line = macd_values[-1]
    return MacdResult(
        macd_line=macd_line,
        signal_line=signal_line,
        histogram=macd_line - signal_line,
    )


def bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    num_std: float = 2.0,
) -> BollingerBands | None:
    """Bands at ``num_std`` population standard deviations around the SMA."""
    if period <= 0:
        raise ValueError("period must be positive")
    if len(prices) < period:
        return None

    recent = pd.Series(prices[:period], dtype="float64")
    middle = float(recent.mean())
    std_dev = float(recent.std(ddof=0))
    offset = num_std * std_dev
    # Full band width as a percentage of the middle band.
    bandwidth_pct = (2 * offset) / middle * 100 if middle != 0 else None
    return BollingerBands(
        upper=middle + offset,
        middle=middle,
        lower=middle - offset,
        bandwidth_pct=bandwidth_pct,
    )


def percent_change(prices: Sequence[float], offset: int) -> float | None:
    """Change from ``prices[offset]`` to the newest close, in percent."""
    if len(prices) <= offset:
        return None
    reference = prices[offset]
    if reference == 0:
        return None
    return (prices[0] - reference) / reference * 100


def momentum(
    prices: Sequence[float],
    week_offset: int = 5,
    month_offset: int = 21,
) -> Momentum:
    """One-week and one-month momentum measured in trading days."""
    return Momentum(
        one_week_pct=percent_change(prices, week_offset),
        one_month_pct=percent_change(prices, month_offset),
    )


def compute_indicators(
    series: PriceSeries,
    params: IndicatorParams | None = None,
) -> IndicatorSet:
    """Compute every configured indicator for one price series."""
    params = params or IndicatorParams()
    closes = series.closes
    return IndicatorSet(
        sma={period: sma(closes, period) for period in params.sma_periods},
        rsi=rsi(closes, params.rsi_period),
        macd=macd(
            closes,
            fast=params.macd_fast,
            slow=params.macd_slow,
            signal=params.macd_signal,
            min_points=params.macd_min_points,
        ),
        bollinger=bollinger_bands(
            closes,
            period=params.bollinger_period,
            num_std=params.bollinger_num_std,
        ),
        momentum=momentum(
            closes,
            week_offset=params.momentum_week_offset,
            month_offset=params.momentum_month_offset,
        ),
    )
