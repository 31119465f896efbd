"""Central logging configuration and the concise per-run logger."""

from __future__ import annotations

import logging

from smamonitor.domain.models import AnalysisResult
from smamonitor.errors import explain


def setup_logger(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure and return the app logger.

    Logs are written to console, plus an optional file if `log_file` is set.
    """
    logger = logging.getLogger("smamonitor")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class RunLogger:
    """One line per run event with fixed line types."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("smamonitor.run")

    def run_started(self, tickers: list[str]) -> None:
        self._logger.info("run | starting monitor for %s", ", ".join(tickers))

    def result(self, result: AnalysisResult) -> None:
        if result.error is not None:
            self._logger.error(
                "result | %s | %s | %s",
                result.ticker,
                result.error.value,
                explain(result.error, result.ticker),
            )
            return

        indicators = result.indicators
        parts = [f"result | {result.ticker}"]
        if result.latest_price is not None:
            parts.append(f"${result.latest_price:,.2f}")
        if result.latest_date is not None:
            parts.append(f"as of {result.latest_date.isoformat()}")
        if indicators is not None:
            parts.append(f"RSI {self._fmt(indicators.rsi, 1)}")
            histogram = indicators.macd.histogram if indicators.macd else None
            parts.append(f"MACD hist {self._fmt(histogram, 3)}")
            parts.append(f"1M {self._fmt_pct(indicators.momentum.one_month_pct)}")
        self._logger.info(" | ".join(parts))
        for signal in result.signals:
            self._logger.info(
                "signal | %s | [%s] %s",
                result.ticker,
                signal.classification.value.upper(),
                signal.text,
            )

    def run_finished(self, results: list[AnalysisResult]) -> None:
        failed = sum(1 for result in results if not result.ok)
        self._logger.info(
            "run | finished | tickers %s | ok %s | failed %s",
            len(results),
            len(results) - failed,
            failed,
        )

    @staticmethod
    def _fmt(value: float | None, decimals: int) -> str:
        if value is None:
            return "N/A"
        return f"{value:.{decimals}f}"

    @staticmethod
    def _fmt_pct(value: float | None) -> str:
        if value is None:
            return "N/A"
        return f"{value:+.2f}%"
