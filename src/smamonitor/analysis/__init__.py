"""Indicator engine and signal classifier."""

from .indicators import IndicatorParams, compute_indicators
from .signals import SignalParams, classify

__all__ = ["IndicatorParams", "SignalParams", "classify", "compute_indicators"]
