"""Tests for application state hydration."""

from __future__ import annotations

from datetime import date, datetime

from lifetrack.models import Profile, RoutineType, StudySession
from lifetrack.state import (
    AppState,
    load_state,
    save_profile,
    save_routines,
    save_sessions,
    seed_routines,
)
from lifetrack.store import PROFILE_KEY, ROUTINES_KEY, SESSIONS_KEY, Store


def _session_on(day: date, minutes: int = 25) -> StudySession:
    local_noon = datetime(day.year, day.month, day.day, 12, 0).astimezone()
    return StudySession(duration_minutes=minutes, timestamp=local_noon)


class TestFreshInstall:
    def test_defaults(self, store: Store) -> None:
        state = load_state(store)
        assert [r.title for r in state.routines] == [
            "Morning Meditation",
            "Deep Work Session",
            "Workout",
        ]
        assert [r.id for r in state.routines] == [1, 2, 3]
        assert not any(r.completed for r in state.routines)
        assert [r.type for r in state.routines] == [
            RoutineType.HABIT,
            RoutineType.STUDY,
            RoutineType.WELLNESS,
        ]
        assert state.study_sessions == []
        assert state.profile == Profile(name="Guest", focus="Personal Growth", cloud_url="")
        assert state.quotes

    def test_fresh_install_writes_nothing(self, store: Store) -> None:
        load_state(store)
        assert store.keys() == []


class TestHydration:
    def test_roundtrip_through_store(self, store: Store) -> None:
        state = load_state(store)
        state.profile.name = "Ada"
        state.routines[0].completed = True
        state.study_sessions.append(_session_on(date(2026, 10, 19)))
        save_profile(store, state)
        save_routines(store, state)
        save_sessions(store, state)

        assert load_state(store) == state

    def test_rehydration_is_idempotent(self, store: Store) -> None:
        state = load_state(store)
        state.routines[1].completed = True
        save_routines(store, state)
        assert load_state(store) == load_state(store)

    def test_persisted_shapes(self, store: Store) -> None:
        state = load_state(store)
        state.study_sessions.append(_session_on(date(2026, 10, 19)))
        save_profile(store, state)
        save_routines(store, state)
        save_sessions(store, state)

        assert store.get(PROFILE_KEY) == {
            "name": "Guest",
            "focus": "Personal Growth",
            "cloudUrl": "",
        }
        assert store.get(ROUTINES_KEY)[0] == {
            "id": 1,
            "title": "Morning Meditation",
            "time": "07:00 AM",
            "completed": False,
            "type": "habit",
        }
        assert set(store.get(SESSIONS_KEY)[0]) == {"subject", "duration", "date"}

    def test_corrupt_profile_falls_back(self, store: Store) -> None:
        store.set(PROFILE_KEY, {"name": ["not", "a", "string"]})
        assert load_state(store).profile == Profile()

    def test_non_list_routines_fall_back_to_seed(self, store: Store) -> None:
        store.set(ROUTINES_KEY, {"oops": True})
        assert load_state(store).routines == seed_routines()

    def test_bad_entries_dropped(self, store: Store) -> None:
        store.set(
            SESSIONS_KEY,
            [
                {"subject": "Deep Work", "duration": 25, "date": "2026-10-19T09:00:00Z"},
                {"subject": "Broken", "duration": -1},
            ],
        )
        sessions = load_state(store).study_sessions
        assert len(sessions) == 1
        assert sessions[0].subject == "Deep Work"

    def test_wholly_invalid_routines_fall_back_to_seed(self, store: Store) -> None:
        store.set(ROUTINES_KEY, [{"junk": 1}, 5])
        assert load_state(store).routines == seed_routines()

    def test_wholly_invalid_sessions_fall_back_to_empty(self, store: Store) -> None:
        store.set(SESSIONS_KEY, [{"subject": "Broken", "duration": 0}])
        assert load_state(store).study_sessions == []

    def test_empty_routine_list_is_kept(self, store: Store) -> None:
        store.set(ROUTINES_KEY, [])
        assert load_state(store).routines == []


class TestDerived:
    def test_pending_and_ratio(self) -> None:
        state = AppState()
        assert state.pending_routines == 3
        assert state.completion_ratio == 0.0
        state.routines[0].completed = True
        assert state.pending_routines == 2
        assert abs(state.completion_ratio - 1 / 3) < 1e-9

    def test_ratio_without_routines(self) -> None:
        assert AppState(routines=[]).completion_ratio == 0.0

    def test_recent_sessions_newest_first(self) -> None:
        state = AppState()
        for minutes in (10, 20, 30, 40):
            state.study_sessions.append(_session_on(date(2026, 10, 19), minutes))
        assert [s.duration_minutes for s in state.recent_sessions(3)] == [40, 30, 20]
        assert state.recent_sessions(0) == []

    def test_weekly_minutes(self) -> None:
        state = AppState()
        monday = date(2026, 10, 19)
        state.study_sessions.extend(
            [
                _session_on(monday),
                _session_on(monday),
                _session_on(date(2026, 10, 21), 10),
                _session_on(date(2026, 10, 12)),  # previous week
            ]
        )
        assert state.weekly_minutes(date(2026, 10, 22)) == [50, 0, 10, 0, 0, 0, 0]

    def test_study_balance(self) -> None:
        state = AppState()
        assert state.study_balance() == 0.0
        state.routines[1].completed = True
        assert state.study_balance() == 1.0
        state.routines[2].completed = True
        assert state.study_balance() == 0.5

    def test_next_routine_id(self) -> None:
        assert AppState().next_routine_id() == 4
        assert AppState(routines=[]).next_routine_id() == 1
