"""Tests for the Alpha Vantage fetch client."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from smamonitor.data.alpha_vantage import AlphaVantageClient
from smamonitor.data.rate_limit import RateLimiter
from smamonitor.errors import (
    ApiKeyError,
    CacheStoreError,
    ErrorKind,
    InvalidTickerError,
    NetworkError,
    NoDataError,
    RateLimitedError,
)
from smamonitor.state.cache import ResponseCache
from smamonitor.state.store import CacheEntry, InMemoryCacheStore

SERIES = {
    "2026-01-05": {"4. close": "105.0000"},
    "2026-01-02": {"4. close": "100.0000"},
}


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, body_error: bool = False):
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if self.body_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    def __init__(self, clock: FakeClock, responses: list[Any] | None = None) -> None:
        self.clock = clock
        self.responses = list(responses or [])
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, params: dict[str, str], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout, "at": self.clock()})
        response = self.responses.pop(0) if self.responses else FakeResponse(
            {"Time Series (Daily)": SERIES}
        )
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        return None


def _client(
    responses: list[Any] | None = None,
    ttl_seconds: float = 4 * 60 * 60,
    delay: float = 12,
) -> tuple[AlphaVantageClient, FakeSession, FakeClock]:
    clock = FakeClock()
    session = FakeSession(clock, responses)
    client = AlphaVantageClient(
        api_key="demo",
        cache=ResponseCache(InMemoryCacheStore(), ttl_seconds=ttl_seconds, clock=clock),
        rate_limiter=RateLimiter(delay, clock=clock, sleep=clock.sleep),
        session=session,  # type: ignore[arg-type]
    )
    return client, session, clock


def test_fetch_requests_daily_series() -> None:
    client, session, _clock = _client()

    payload = client.fetch("msft")

    assert payload == {"Time Series (Daily)": SERIES}
    assert session.calls[0]["params"] == {
        "function": "TIME_SERIES_DAILY",
        "symbol": "MSFT",
        "outputsize": "compact",
        "apikey": "demo",
    }
    assert session.calls[0]["url"] == AlphaVantageClient.BASE_URL


@pytest.mark.parametrize(
    ("payload", "error_type", "kind"),
    [
        (
            {"Error Message": "Invalid API call.", "Time Series (Daily)": SERIES},
            InvalidTickerError,
            ErrorKind.INVALID_TICKER,
        ),
        ({"Note": "Thank you for using Alpha Vantage!"}, RateLimitedError, ErrorKind.RATE_LIMITED),
        ({"Information": "Invalid API key."}, ApiKeyError, ErrorKind.API_KEY_ERROR),
        ({"Meta Data": {}}, NoDataError, ErrorKind.NO_DATA),
        ({"Time Series (Daily)": {}}, NoDataError, ErrorKind.NO_DATA),
        ({"Error Message": "x", "Note": "y"}, InvalidTickerError, ErrorKind.INVALID_TICKER),
    ],
)
def test_fetch_classifies_provider_errors(
    payload: dict[str, Any], error_type: type[Exception], kind: ErrorKind
) -> None:
    client, _session, _clock = _client([FakeResponse(payload)])

    with pytest.raises(error_type) as excinfo:
        client.fetch("ZZZZ")

    assert excinfo.value.kind == kind
    assert client.cache.lookup("ZZZZ") is None


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"Time Series (Daily)": SERIES}, status_code=503),
        FakeResponse(body_error=True),
        FakeResponse(["not", "an", "object"]),
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
    ],
)
def test_fetch_maps_transport_failures_to_network_error(response: Any) -> None:
    client, _session, _clock = _client([response])

    with pytest.raises(NetworkError) as excinfo:
        client.fetch("MSFT")

    assert excinfo.value.kind == ErrorKind.NETWORK_ERROR


def test_cache_hit_skips_network_and_rate_limit() -> None:
    client, session, clock = _client()

    client.fetch("MSFT")
    before = clock.now
    client.fetch("MSFT")

    assert len(session.calls) == 1
    assert clock.now == before


def test_fetch_after_ttl_calls_network_exactly_once_more() -> None:
    client, session, clock = _client(ttl_seconds=60)

    client.fetch("MSFT")
    clock.now += 61
    client.fetch("MSFT")
    client.fetch("MSFT")

    assert len(session.calls) == 2


def test_network_calls_are_spaced_by_delay_across_tickers() -> None:
    client, session, _clock = _client(delay=12)

    for ticker in ["AAA", "BBB", "AAA", "CCC", "DDD"]:
        client.fetch(ticker)

    call_times = [call["at"] for call in session.calls]
    assert len(call_times) == 4
    gaps = [later - earlier for earlier, later in zip(call_times, call_times[1:])]
    assert all(gap >= 12 for gap in gaps)


def test_failed_calls_still_consume_rate_limit() -> None:
    client, session, _clock = _client(
        [requests.ConnectionError("down"), FakeResponse({"Time Series (Daily)": SERIES})],
        delay=12,
    )

    with pytest.raises(NetworkError):
        client.fetch("AAA")
    client.fetch("BBB")

    assert session.calls[1]["at"] - session.calls[0]["at"] >= 12


class ReadOnlyStore(InMemoryCacheStore):
    def set(self, entry: CacheEntry) -> None:
        raise CacheStoreError("attempt to write a readonly database")


def test_cache_write_failure_still_returns_payload() -> None:
    clock = FakeClock()
    session = FakeSession(clock)
    client = AlphaVantageClient(
        api_key="demo",
        cache=ResponseCache(ReadOnlyStore(), ttl_seconds=60, clock=clock),
        rate_limiter=RateLimiter(12, clock=clock, sleep=clock.sleep),
        session=session,  # type: ignore[arg-type]
    )

    assert client.fetch("MSFT") == {"Time Series (Daily)": SERIES}
    assert client.fetch("MSFT") == {"Time Series (Daily)": SERIES}
    assert len(session.calls) == 2
