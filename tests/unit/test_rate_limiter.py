"""
Unit tests for the fixed-interval rate limiter.
"""

import pytest

from portfolio_engine.infrastructure.quotes import FixedIntervalGate


class FakeTime:
    """Manual clock whose sleep advances time."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


class TestFixedIntervalGate:
    def test_should_pass_first_acquisition_immediately(self, fake_time: FakeTime) -> None:
        gate = FixedIntervalGate(13.0, clock=fake_time.clock, sleep=fake_time.sleep)

        gate.acquire()

        assert fake_time.sleeps == []

    def test_should_space_back_to_back_acquisitions(self, fake_time: FakeTime) -> None:
        gate = FixedIntervalGate(13.0, clock=fake_time.clock, sleep=fake_time.sleep)

        gate.acquire()
        gate.acquire()
        gate.acquire()

        assert fake_time.sleeps == [13.0, 13.0]
        assert fake_time.now == 126.0

    def test_should_only_wait_for_remaining_interval(self, fake_time: FakeTime) -> None:
        gate = FixedIntervalGate(13.0, clock=fake_time.clock, sleep=fake_time.sleep)

        gate.acquire()
        fake_time.now += 10.0
        gate.acquire()

        assert fake_time.sleeps == [pytest.approx(3.0)]

    def test_should_not_wait_after_interval_elapsed(self, fake_time: FakeTime) -> None:
        gate = FixedIntervalGate(13.0, clock=fake_time.clock, sleep=fake_time.sleep)

        gate.acquire()
        fake_time.now += 60.0
        gate.acquire()

        assert fake_time.sleeps == []

    def test_should_never_wait_with_zero_interval(self, fake_time: FakeTime) -> None:
        gate = FixedIntervalGate(0.0, clock=fake_time.clock, sleep=fake_time.sleep)

        gate.acquire()
        gate.acquire()

        assert fake_time.sleeps == []

    def test_should_reject_negative_interval(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            FixedIntervalGate(-1.0)
