"""Daily technical-indicator monitor for stock tickers."""

__version__ = "0.1.0"
