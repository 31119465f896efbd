"""Domain models."""

from .models import (
    AnalysisResult,
    BollingerBands,
    IndicatorSet,
    MacdResult,
    Momentum,
    PricePoint,
    PriceSeries,
    Signal,
    SignalType,
)

__all__ = [
    "AnalysisResult",
    "BollingerBands",
    "IndicatorSet",
    "MacdResult",
    "Momentum",
    "PricePoint",
    "PriceSeries",
    "Signal",
    "SignalType",
]
