"""In-memory application state, hydrated once from the store."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, Field, ValidationError

from lifetrack.models import Profile, Quote, Routine, RoutineType, StudySession
from lifetrack.quotes import QUOTES
from lifetrack.store import PROFILE_KEY, ROUTINES_KEY, SESSIONS_KEY, Store

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def seed_routines() -> list[Routine]:
    """Routines a fresh install starts with."""
    return [
        Routine(id=1, title="Morning Meditation", time="07:00 AM", type=RoutineType.HABIT),
        Routine(id=2, title="Deep Work Session", time="09:00 AM", type=RoutineType.STUDY),
        Routine(id=3, title="Workout", time="05:00 PM", type=RoutineType.WELLNESS),
    ]


class AppState(BaseModel):
    """Single in-memory source of truth. Only the action layer mutates it."""

    profile: Profile = Field(default_factory=Profile)
    routines: list[Routine] = Field(default_factory=seed_routines)
    study_sessions: list[StudySession] = Field(default_factory=list)
    quotes: list[Quote] = Field(default_factory=lambda: list(QUOTES))

    def find_routine(self, routine_id: int) -> Routine | None:
        for routine in self.routines:
            if routine.id == routine_id:
                return routine
        return None

    def next_routine_id(self) -> int:
        return max((r.id for r in self.routines), default=0) + 1

    @property
    def pending_routines(self) -> int:
        return sum(1 for r in self.routines if not r.completed)

    @property
    def completion_ratio(self) -> float:
        if not self.routines:
            return 0.0
        return (len(self.routines) - self.pending_routines) / len(self.routines)

    def recent_sessions(self, limit: int = 3) -> list[StudySession]:
        """Most recent sessions, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.study_sessions[-limit:]))

    def weekly_minutes(self, today: date) -> list[int]:
        """Study minutes per weekday (Mon..Sun) of the week containing ``today``."""
        week_start = today - timedelta(days=today.weekday())
        minutes = [0] * 7
        for session in self.study_sessions:
            day = session.timestamp.astimezone().date()
            offset = (day - week_start).days
            if 0 <= offset < 7:
                minutes[offset] += session.duration_minutes
        return minutes

    def study_balance(self) -> float:
        """Share of completed study routines among completed study and wellness ones."""
        study = sum(1 for r in self.routines if r.completed and r.type == RoutineType.STUDY)
        wellness = sum(
            1 for r in self.routines if r.completed and r.type == RoutineType.WELLNESS
        )
        if study + wellness == 0:
            return 0.0
        return study / (study + wellness)


# ---------------------------------------------------------------------------
# Hydration
# ---------------------------------------------------------------------------


def _load_list(raw: Any, model: type[M], key: str, fallback: Callable[[], list[M]]) -> list[M]:
    """Validate a stored list entry by entry, dropping the ones that don't parse."""
    if not isinstance(raw, list):
        if raw is not None:
            log.warning("Stored %r is not a list; using defaults.", key)
        return fallback()
    items: list[M] = []
    for entry in raw:
        try:
            items.append(model.model_validate(entry))
        except ValidationError:
            log.warning("Dropping unreadable %s entry: %r", key, entry)
    if raw and not items:
        log.warning("No readable %s entries; using defaults.", key)
        return fallback()
    return items


def load_state(store: Store) -> AppState:
    """Hydrate the application state from the store, with seed fallbacks."""
    raw_profile = store.get(PROFILE_KEY)
    try:
        profile = Profile.model_validate(raw_profile) if raw_profile is not None else Profile()
    except ValidationError:
        log.warning("Stored profile is unreadable; using the guest profile.")
        profile = Profile()

    routines = _load_list(store.get(ROUTINES_KEY), Routine, ROUTINES_KEY, seed_routines)
    sessions = _load_list(store.get(SESSIONS_KEY), StudySession, SESSIONS_KEY, list)

    return AppState(profile=profile, routines=routines, study_sessions=sessions)


# ---------------------------------------------------------------------------
# Write-through helpers
# ---------------------------------------------------------------------------


def routines_payload(routines: list[Routine]) -> list[dict[str, Any]]:
    return [r.model_dump(mode="json") for r in routines]


def session_payload(session: StudySession) -> dict[str, Any]:
    return session.model_dump(mode="json", by_alias=True)


def save_profile(store: Store, state: AppState) -> None:
    store.set(PROFILE_KEY, state.profile.model_dump(mode="json", by_alias=True))


def save_routines(store: Store, state: AppState) -> None:
    store.set(ROUTINES_KEY, routines_payload(state.routines))


def save_sessions(store: Store, state: AppState) -> None:
    store.set(SESSIONS_KEY, [session_payload(s) for s in state.study_sessions])
