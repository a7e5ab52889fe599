"""Mutation entry points.

Every action runs the same steps in order: mutate the state, write the
affected slice through the store, re-render, then hand the change to the
sync client. Unknown targets are silent no-ops reported by a False return.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from rich.console import RenderableType

from lifetrack.models import PROFILE_FIELDS, Routine, RoutineCreate, Screen, StudySession
from lifetrack.router import Router
from lifetrack.scheduler import Scheduler
from lifetrack.state import AppState, load_state, save_profile, save_routines, save_sessions
from lifetrack.store import Store
from lifetrack.sync import Dispatch, SyncClient
from lifetrack.timer import SESSION_MINUTES, SESSION_SUBJECT, TimerEngine
from lifetrack.views import RenderContext

log = logging.getLogger(__name__)


class Actions:
    """The only code allowed to mutate ``AppState``."""

    def __init__(
        self,
        state: AppState,
        store: Store,
        router: Router,
        sync: SyncClient,
        timer: TimerEngine,
    ) -> None:
        self.state = state
        self.store = store
        self.router = router
        self.sync = sync
        self.timer = timer
        self.timer.on_complete = self.complete_timer_session

    # ------------------------------------------------------------------
    # Routines
    # ------------------------------------------------------------------

    def toggle_routine_completion(self, routine_id: int) -> bool:
        routine = self.state.find_routine(routine_id)
        if routine is None:
            log.debug("No routine #%s to toggle", routine_id)
            return False
        routine.completed = not routine.completed
        save_routines(self.store, self.state)
        self.router.navigate(Screen.ROUTINE)
        self.sync.push_routines(self.state.routines)
        return True

    def add_routine(self, routine_in: RoutineCreate) -> Routine:
        routine = Routine(
            id=self.state.next_routine_id(),
            title=routine_in.title,
            time=routine_in.time,
            type=routine_in.type,
        )
        self.state.routines.append(routine)
        save_routines(self.store, self.state)
        self.router.navigate(Screen.ROUTINE)
        self.sync.push_routines(self.state.routines)
        return routine

    def remove_routine(self, routine_id: int) -> bool:
        routine = self.state.find_routine(routine_id)
        if routine is None:
            log.debug("No routine #%s to remove", routine_id)
            return False
        self.state.routines.remove(routine)
        save_routines(self.store, self.state)
        self.router.navigate(Screen.ROUTINE)
        self.sync.push_routines(self.state.routines)
        return True

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_profile_field(self, key: str, value: str) -> bool:
        attr = PROFILE_FIELDS.get(key)
        if attr is None:
            log.debug("Ignoring unknown profile field %r", key)
            return False
        setattr(self.state.profile, attr, value)
        save_profile(self.store, self.state)
        if key == "cloudUrl":
            self.router.navigate(Screen.PROFILE)
        else:
            self.router.refresh_if(Screen.PROFILE)
        return True

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def start_or_pause_timer(self) -> None:
        self.timer.toggle()
        self.router.refresh_if(Screen.STUDY)

    def cancel_timer(self) -> None:
        self.timer.cancel()
        self.router.refresh_if(Screen.STUDY)

    def complete_timer_session(self, completed_at: datetime) -> StudySession:
        """Log a finished focus session. Called by the timer engine."""
        session = StudySession(
            subject=SESSION_SUBJECT,
            duration_minutes=SESSION_MINUTES,
            timestamp=completed_at,
        )
        self.state.study_sessions.append(session)
        save_sessions(self.store, self.state)
        self.router.refresh_if(Screen.STUDY)
        self.sync.push_session(session)
        return session


class Tracker:
    """Wires state, store, router, timer, sync client and actions together."""

    def __init__(
        self,
        store: Store,
        scheduler: Scheduler,
        on_render: Optional[Callable[[Screen, RenderableType], None]] = None,
        dispatch: Optional[Dispatch] = None,
    ) -> None:
        self.store = store
        self.state = load_state(store)
        self.sync = SyncClient(lambda: self.state.profile.cloud_url, dispatch=dispatch)
        self.timer_scheduler = scheduler
        self.timer = TimerEngine(scheduler)
        self.router = Router(self.state, context=self.render_context, on_render=on_render)
        self.actions = Actions(self.state, store, self.router, self.sync, self.timer)

    def render_context(self) -> RenderContext:
        return RenderContext(timer=self.timer.state, sync_status=self.sync.last_status)

    def close(self, drain_timeout: float = 5.0) -> None:
        self.timer.cancel()
        self.sync.drain(drain_timeout)
        self.store.close()
