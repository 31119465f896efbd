"""Turn a raw Alpha Vantage daily payload into a validated PriceSeries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd

from smamonitor.domain.models import PricePoint, PriceSeries
from smamonitor.errors import MalformedDataError

TIME_SERIES_KEY = "Time Series (Daily)"
CLOSE_FIELD = "4. close"


def extract_price_series(payload: Mapping[str, Any], ticker: str) -> PriceSeries:
    """Return closes newest first.

    Raises MalformedDataError for a missing or empty series, unparsable dates,
    duplicate dates, or close values that are missing, non-numeric or not
    positive. Nothing is coerced or dropped silently.
    """
    symbol = ticker.strip().upper()
    series = payload.get(TIME_SERIES_KEY)
    if not isinstance(series, Mapping):
        raise MalformedDataError(f"{symbol}: response missing '{TIME_SERIES_KEY}' section")
    if not series:
        raise MalformedDataError(f"{symbol}: '{TIME_SERIES_KEY}' section is empty")

    bad_records = [key for key, record in series.items() if not isinstance(record, Mapping)]
    if bad_records:
        raise MalformedDataError(f"{symbol}: records for {bad_records[:3]} are not objects")

    frame = pd.DataFrame.from_dict(
        {key: dict(record) for key, record in series.items()}, orient="index"
    )
    if CLOSE_FIELD not in frame.columns or frame[CLOSE_FIELD].isna().any():
        raise MalformedDataError(f"{symbol}: every record needs a '{CLOSE_FIELD}' field")

    try:
        frame.index = pd.to_datetime(frame.index, format="%Y-%m-%d")
    except (TypeError, ValueError) as exc:
        raise MalformedDataError(f"{symbol}: invalid date keys: {exc}") from exc
    if frame.index.has_duplicates:
        repeated = frame.index[frame.index.duplicated()]
        duplicates = sorted({stamp.date().isoformat() for stamp in repeated})
        raise MalformedDataError(f"{symbol}: duplicate dates {duplicates}")

    try:
        closes = pd.to_numeric(frame[CLOSE_FIELD], errors="raise").astype("float64")
    except (TypeError, ValueError) as exc:
        raise MalformedDataError(f"{symbol}: non-numeric close value: {exc}") from exc

    closes = closes.sort_index(ascending=False)
    points = tuple(
        PricePoint(date=stamp.date(), close=float(value)) for stamp, value in closes.items()
    )
    return PriceSeries(ticker=symbol, points=points)
