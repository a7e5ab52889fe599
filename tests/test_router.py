"""Tests for the screen router."""

from __future__ import annotations

import random
from datetime import date

from lifetrack.display import render_text
from lifetrack.models import Screen
from lifetrack.router import Router, parse_screen
from lifetrack.state import AppState
from lifetrack.views import RenderContext


def _router(state: AppState | None = None, rendered: list | None = None) -> Router:
    def context() -> RenderContext:
        return RenderContext(today=date(2026, 10, 19), rng=random.Random(3))

    def on_render(screen, content) -> None:
        if rendered is not None:
            rendered.append(screen)

    return Router(state or AppState(), context=context, on_render=on_render)


class TestParseScreen:
    def test_known(self) -> None:
        assert parse_screen("routine") is Screen.ROUTINE
        assert parse_screen(" Profile ") is Screen.PROFILE
        assert parse_screen(Screen.HOME) is Screen.HOME

    def test_unknown(self) -> None:
        assert parse_screen("settings") is None
        assert parse_screen("") is None


class TestNavigate:
    def test_defaults_to_home(self) -> None:
        assert _router().current is Screen.HOME

    def test_navigate_renders_and_updates_current(self) -> None:
        rendered: list[Screen] = []
        router = _router(rendered=rendered)
        content = router.navigate("study")
        assert content is not None
        assert router.current is Screen.STUDY
        assert rendered == [Screen.STUDY]

    def test_unknown_screen_is_noop(self) -> None:
        rendered: list[Screen] = []
        router = _router(rendered=rendered)
        router.navigate(Screen.ROUTINE)
        assert router.navigate("nowhere") is None
        assert router.current is Screen.ROUTINE
        assert rendered == [Screen.ROUTINE]

    def test_rerender_is_idempotent(self) -> None:
        router = _router()
        for screen in Screen:
            first = render_text(router.navigate(screen))
            second = render_text(router.navigate(screen))
            assert first == second

    def test_nav_items_mark_active(self) -> None:
        router = _router()
        router.navigate(Screen.PROGRESS)
        items = router.nav_items()
        assert [s for s, _ in items] == list(Screen)
        assert [s for s, active in items if active] == [Screen.PROGRESS]


class TestRefresh:
    def test_refresh_current(self) -> None:
        rendered: list[Screen] = []
        router = _router(rendered=rendered)
        router.navigate(Screen.PROFILE)
        router.refresh()
        assert rendered == [Screen.PROFILE, Screen.PROFILE]

    def test_refresh_if_only_when_active(self) -> None:
        rendered: list[Screen] = []
        router = _router(rendered=rendered)
        assert router.refresh_if(Screen.STUDY) is None
        router.navigate(Screen.STUDY)
        assert router.refresh_if(Screen.STUDY) is not None
        assert rendered == [Screen.STUDY, Screen.STUDY]

    def test_render_reflects_state_changes(self) -> None:
        state = AppState()
        router = _router(state)
        before = render_text(router.navigate(Screen.ROUTINE))
        state.routines[0].completed = True
        after = render_text(router.refresh())
        assert before != after
