"""Screen router: tracks the active screen and re-renders it on demand."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from rich.console import RenderableType

from lifetrack.models import Screen
from lifetrack.state import AppState
from lifetrack.views import VIEWS, RenderContext

log = logging.getLogger(__name__)

ScreenId = Union[Screen, str]


def parse_screen(screen_id: ScreenId) -> Optional[Screen]:
    """Return the matching screen, or None for an unknown id."""
    if isinstance(screen_id, Screen):
        return screen_id
    try:
        return Screen(str(screen_id).strip().lower())
    except ValueError:
        return None


class Router:
    """Maps screen ids to views.

    Navigation never raises: an unknown id renders nothing and leaves the
    current screen alone.
    """

    def __init__(
        self,
        state: AppState,
        context: Callable[[], RenderContext] = RenderContext,
        on_render: Optional[Callable[[Screen, RenderableType], None]] = None,
    ) -> None:
        self.state = state
        self._context = context
        self.on_render = on_render
        self.current: Screen = Screen.HOME

    def navigate(self, screen_id: ScreenId) -> Optional[RenderableType]:
        screen = parse_screen(screen_id)
        if screen is None:
            log.debug("Ignoring navigation to unknown screen %r", screen_id)
            return None
        self.current = screen
        return self._render(screen)

    def refresh(self) -> Optional[RenderableType]:
        """Re-render the active screen."""
        return self._render(self.current)

    def refresh_if(self, screen: Screen) -> Optional[RenderableType]:
        """Re-render only if ``screen`` is the one on display."""
        if self.current != screen:
            return None
        return self._render(screen)

    def nav_items(self) -> list[tuple[Screen, bool]]:
        """Every screen with its active flag, in navigation order."""
        return [(screen, screen == self.current) for screen in Screen]

    def _render(self, screen: Screen) -> RenderableType:
        view = VIEWS[screen]
        content = view(self.state, self._context())
        if self.on_render is not None:
            self.on_render(screen, content)
        return content
