"""Tests for outbound call spacing."""

from __future__ import annotations

import pytest

from smamonitor.data.rate_limit import RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_call_does_not_wait() -> None:
    clock = FakeClock()
    limiter = RateLimiter(12, clock=clock, sleep=clock.sleep)

    assert limiter.wait() == 0.0
    assert clock.sleeps == []


def test_waits_out_remaining_delay() -> None:
    clock = FakeClock()
    limiter = RateLimiter(12, clock=clock, sleep=clock.sleep)

    limiter.wait()
    clock.now += 5
    waited = limiter.wait()

    assert waited == pytest.approx(7.0)
    assert clock.sleeps == [pytest.approx(7.0)]
    assert limiter.last_call_at == pytest.approx(12.0)


def test_no_wait_after_delay_has_elapsed() -> None:
    clock = FakeClock()
    limiter = RateLimiter(12, clock=clock, sleep=clock.sleep)

    limiter.wait()
    clock.now += 20

    assert limiter.wait() == 0.0
    assert clock.sleeps == []


def test_rejects_negative_delay() -> None:
    with pytest.raises(ValueError):
        RateLimiter(-1)
