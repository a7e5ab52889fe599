"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from lifetrack.scheduler import LoopScheduler
from lifetrack.store import Store


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def store(tmp_path: Path):
    """A fresh store file for each test."""
    s = Store.open(tmp_path / "test.db")
    yield s
    s.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def loop(clock: FakeClock) -> LoopScheduler:
    return LoopScheduler(clock=clock, sleep=clock.sleep)
