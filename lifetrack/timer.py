"""Focus countdown state machine."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from lifetrack.models import TimerPhase, TimerState
from lifetrack.scheduler import Handle, Scheduler

log = logging.getLogger(__name__)

SESSION_MINUTES: int = 25
SESSION_SUBJECT: str = "Deep Work"
TICK_SECONDS: float = 1.0


class TimerEngine:
    """One countdown, driven by a recurring one-second tick.

    Idle and paused both have ``running == False``; they differ only in
    whether ``remaining_seconds`` is back at the full session length.
    At most one tick is ever scheduled.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        session_seconds: int = SESSION_MINUTES * 60,
        on_complete: Optional[Callable[[datetime], None]] = None,
        on_tick: Optional[Callable[[TimerState], None]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        if session_seconds <= 0:
            raise ValueError("session_seconds must be positive")
        self._scheduler = scheduler
        self.session_seconds = session_seconds
        self.remaining_seconds = session_seconds
        self.running = False
        self._tick_handle: Optional[Handle] = None
        self.on_complete = on_complete
        self.on_tick = on_tick
        self._clock = clock

    @property
    def state(self) -> TimerState:
        return TimerState(
            remaining_seconds=self.remaining_seconds,
            session_seconds=self.session_seconds,
            running=self.running,
        )

    @property
    def phase(self) -> TimerPhase:
        return self.state.phase

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin (or restart) ticking from the current remaining time."""
        self._cancel_tick()
        self.running = True
        self._tick_handle = self._scheduler.call_every(TICK_SECONDS, self.tick)
        log.debug("Timer running from %ds", self.remaining_seconds)
        self._notify()

    def pause(self) -> None:
        if not self.running:
            return
        self._cancel_tick()
        self.running = False
        log.debug("Timer paused at %ds", self.remaining_seconds)
        self._notify()

    def resume(self) -> None:
        if self.running:
            return
        self.start()

    def toggle(self) -> None:
        """Start from idle, pause while running, resume when paused."""
        if self.running:
            self.pause()
        else:
            self.start()

    def cancel(self) -> None:
        """Stop and return to idle without completing a session."""
        self._cancel_tick()
        self.running = False
        self.remaining_seconds = self.session_seconds
        self._notify()

    def tick(self) -> None:
        if not self.running:
            return
        if self.remaining_seconds > 0:
            self.remaining_seconds -= 1
        if self.remaining_seconds == 0:
            self._complete()
            return
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._scheduler.cancel(self._tick_handle)
            self._tick_handle = None

    def _complete(self) -> None:
        self._cancel_tick()
        self.running = False
        self.remaining_seconds = self.session_seconds
        completed_at = self._clock()
        log.info("Focus session complete at %s", completed_at.isoformat())
        self._notify()
        if self.on_complete is not None:
            self.on_complete(completed_at)

    def _notify(self) -> None:
        if self.on_tick is not None:
            self.on_tick(self.state)
