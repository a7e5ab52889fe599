"""Single-threaded callback scheduling for the timer.

Everything runs on one execution context: a recurring callback is a timer
entry that re-arms itself after it fires. ``LoopScheduler`` is a small
cooperative loop for the terminal; ``TkScheduler`` hands the same work to
the tkinter main loop.
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Any, Callable, Optional, Protocol

Handle = Any


class Scheduler(Protocol):
    """What the timer engine needs from an event loop."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> Handle: ...

    def cancel(self, handle: Handle) -> None: ...


class LoopScheduler:
    """Cooperative loop with an injectable clock.

    Tests pass a fake ``clock`` and a ``sleep`` that advances it, so a
    25-minute countdown runs instantly.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._queue: list[tuple[float, int, int]] = []
        self._jobs: dict[int, tuple[float, Callable[[], None]]] = {}
        self._ids = itertools.count(1)
        self._seq = itertools.count()

    @property
    def active(self) -> int:
        """Number of live recurring jobs."""
        return len(self._jobs)

    def call_every(self, interval: float, callback: Callable[[], None]) -> int:
        if interval <= 0:
            raise ValueError("interval must be positive")
        job_id = next(self._ids)
        self._jobs[job_id] = (interval, callback)
        heapq.heappush(self._queue, (self._clock() + interval, next(self._seq), job_id))
        return job_id

    def cancel(self, handle: int) -> None:
        # Stale heap entries are skipped when they surface.
        self._jobs.pop(handle, None)

    def _next_due(self) -> Optional[float]:
        while self._queue and self._queue[0][2] not in self._jobs:
            heapq.heappop(self._queue)
        return self._queue[0][0] if self._queue else None

    def run_once(self) -> bool:
        """Wait for and fire the next due job. Returns False when idle."""
        due = self._next_due()
        if due is None:
            return False
        delay = due - self._clock()
        if delay > 0:
            self._sleep(delay)
        _, _, job_id = heapq.heappop(self._queue)
        interval, callback = self._jobs[job_id]
        heapq.heappush(self._queue, (due + interval, next(self._seq), job_id))
        callback()
        return True

    def run_until(self, predicate: Callable[[], bool]) -> None:
        """Run jobs until ``predicate()`` is true or nothing is scheduled."""
        while not predicate():
            if not self.run_once():
                return

    def run_for(self, seconds: float) -> None:
        """Run every job that falls due within the next ``seconds``."""
        deadline = self._clock() + seconds
        while True:
            due = self._next_due()
            if due is None or due > deadline:
                break
            self.run_once()
        remaining = deadline - self._clock()
        if remaining > 0:
            self._sleep(remaining)


class TkScheduler:
    """Recurring callbacks on a tkinter widget's ``after`` queue."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget
        self._after_ids: dict[int, str] = {}
        self._ids = itertools.count(1)

    def call_every(self, interval: float, callback: Callable[[], None]) -> int:
        job_id = next(self._ids)
        delay_ms = int(interval * 1000)

        def _fire() -> None:
            if job_id not in self._after_ids:
                return
            self._after_ids[job_id] = self._widget.after(delay_ms, _fire)
            callback()

        self._after_ids[job_id] = self._widget.after(delay_ms, _fire)
        return job_id

    def cancel(self, handle: int) -> None:
        after_id = self._after_ids.pop(handle, None)
        if after_id is not None:
            self._widget.after_cancel(after_id)
