"""Market data client and payload extraction."""

from .alpha_vantage import AlphaVantageClient
from .base import DailySeriesClient
from .extract import extract_price_series
from .rate_limit import RateLimiter

__all__ = [
    "AlphaVantageClient",
    "DailySeriesClient",
    "RateLimiter",
    "extract_price_series",
]
