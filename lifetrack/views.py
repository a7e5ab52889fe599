"""Screen rendering: pure functions from application state to Rich renderables.

Nothing here touches the store, the network or the clock directly; the
date, random source and timer snapshot come in through ``RenderContext``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lifetrack.models import Screen, SyncStatus, TimerPhase, TimerState
from lifetrack.quotes import pick_quote
from lifetrack.state import AppState
from lifetrack.timer import SESSION_MINUTES

_WEEKDAYS = ["M", "T", "W", "T", "F", "S", "S"]
_BAR_HEIGHT = 5

_TIMER_STATUS: dict[TimerPhase, tuple[str, str]] = {
    TimerPhase.IDLE: ("Ready to focus?", "dim"),
    TimerPhase.RUNNING: ("Focusing...", "bold yellow"),
    TimerPhase.PAUSED: ("Paused", "dim"),
}

_TIMER_BUTTON: dict[TimerPhase, str] = {
    TimerPhase.IDLE: "Start Session",
    TimerPhase.RUNNING: "Pause Session",
    TimerPhase.PAUSED: "Resume Session",
}


@dataclass
class RenderContext:
    """Everything a view may read besides the application state."""

    today: date = field(default_factory=date.today)
    rng: random.Random = field(default_factory=random.Random)
    timer: TimerState = field(
        default_factory=lambda: TimerState(
            remaining_seconds=SESSION_MINUTES * 60, session_seconds=SESSION_MINUTES * 60
        )
    )
    sync_status: Optional[SyncStatus] = None


def timer_button_label(timer: TimerState) -> str:
    return _TIMER_BUTTON[timer.phase]


def timer_status(timer: TimerState) -> str:
    return _TIMER_STATUS[timer.phase][0]


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


def render_home(state: AppState, ctx: RenderContext) -> RenderableType:
    quote = pick_quote(state.quotes, ctx.rng)
    header = Text()
    header.append(ctx.today.strftime("%A, %B %d").replace(" 0", " ") + "\n", style="dim")
    header.append(f"Welcome back, {state.profile.name}\n", style="bold")
    header.append(f'"{quote.text}"\n', style="italic")
    header.append(f"- {quote.author}", style="dim")

    overview = Table(show_header=True, box=None, expand=True)
    overview.add_column("Tasks Left", justify="center")
    overview.add_column("Study Sessions", justify="center")
    overview.add_column("Focus Score", justify="center")
    overview.add_row(
        f"[bold yellow]{state.pending_routines}[/bold yellow]",
        f"[bold cyan]{len(state.study_sessions)}[/bold cyan]",
        f"[bold]{state.completion_ratio * 100:.0f}%[/bold]",
    )

    return Group(
        header,
        Panel(overview, title="Daily Overview", border_style="blue"),
        Text("[ Start Focus Session ]", justify="center", style="bold"),
    )


def render_routine(state: AppState, ctx: RenderContext) -> RenderableType:
    table = Table(show_header=False, box=None, pad_edge=False, expand=True)
    table.add_column("done", width=3)
    table.add_column("id", width=5)
    table.add_column("title")
    table.add_column("when", justify="right")

    for routine in state.routines:
        if routine.completed:
            mark, style = "[x]", "strike dim"
        else:
            mark, style = "[ ]", ""
        table.add_row(
            Text(mark),
            f"#{routine.id}",
            Text(routine.title, style=style),
            f"{routine.time} - {routine.type.value}",
        )

    body: RenderableType = table if state.routines else Text("No routines.", style="dim")
    return Group(
        Text("Your Routine", style="bold"),
        Text("Design your perfect day.", style="dim"),
        Panel(body, border_style="blue"),
        Text("+ Add New Routine", justify="center", style="dim"),
    )


def render_study(state: AppState, ctx: RenderContext) -> RenderableType:
    status, status_style = _TIMER_STATUS[ctx.timer.phase]
    timer_text = Text(justify="center")
    timer_text.append(ctx.timer.display + "\n", style="bold")
    timer_text.append(status + "\n", style=status_style)
    timer_text.append(f"[ {timer_button_label(ctx.timer)} ]", style="bold")

    recent = state.recent_sessions(3)
    if recent:
        sessions = Table(show_header=False, box=None, expand=True)
        sessions.add_column("subject")
        sessions.add_column("minutes", justify="right")
        sessions.add_column("date", justify="right")
        for s in recent:
            sessions.add_row(
                s.subject,
                f"[yellow]{s.duration_minutes} min[/yellow]",
                s.timestamp.astimezone().date().isoformat(),
            )
        session_body: RenderableType = sessions
    else:
        session_body = Text("No sessions yet.", style="dim")

    return Group(
        Text("Focus Mode", style="bold"),
        Panel(timer_text, border_style="yellow"),
        Panel(session_body, title="Recent Sessions", border_style="blue"),
    )


def _bars(minutes: list[int]) -> Text:
    peak = max(minutes) if any(minutes) else 0
    heights = [round(m / peak * _BAR_HEIGHT) if peak else 0 for m in minutes]
    text = Text()
    for row in range(_BAR_HEIGHT, 0, -1):
        for h in heights:
            text.append(" # " if h >= row else "   ", style="yellow" if h == _BAR_HEIGHT else "")
        text.append("\n")
    text.append("".join(f" {d} " for d in _WEEKDAYS), style="dim")
    return text


def render_progress(state: AppState, ctx: RenderContext) -> RenderableType:
    minutes = state.weekly_minutes(ctx.today)
    total = sum(minutes)
    consistency = Group(_bars(minutes), Text(f"{total} min this week", style="dim"))

    share = state.study_balance()
    width = 30
    filled = round(share * width)
    balance = Text()
    balance.append("Study vs. Wellness\n", style="dim")
    balance.append("#" * filled, style="cyan")
    balance.append("-" * (width - filled), style="dim")
    balance.append(f" {share * 100:.0f}% study")

    return Group(
        Text("Progress", style="bold"),
        Panel(consistency, title="Weekly Consistency", border_style="blue"),
        Panel(balance, title="Life Balance", border_style="blue"),
    )


def render_profile(state: AppState, ctx: RenderContext) -> RenderableType:
    profile = state.profile
    initial = profile.name[:1].upper() or "?"
    header = Text(justify="center")
    header.append(f"( {initial} )\n", style="bold yellow")
    header.append(profile.name + "\n", style="bold")
    header.append(profile.focus, style="dim")

    sync = Text()
    if profile.sync_enabled:
        sync.append(f"Endpoint: {profile.cloud_url}\n")
        sync.append("Connected", style="cyan")
        if ctx.sync_status is not None:
            outcome = "ok" if ctx.sync_status.ok else f"failed ({ctx.sync_status.detail})"
            sync.append(f"\nLast sync: {ctx.sync_status.kind.value} {outcome}", style="dim")
    else:
        sync.append("Paste your sheet web-app URL to enable live tracking.\n", style="dim")
        sync.append("Not connected", style="dim")

    return Group(
        header,
        Panel(Text(f"Display Name: {profile.name}\nFocus: {profile.focus}"), title="Settings"),
        Panel(sync, title="Cloud Sync", border_style="cyan" if profile.sync_enabled else "dim"),
    )


VIEWS: dict[Screen, Callable[[AppState, RenderContext], RenderableType]] = {
    Screen.HOME: render_home,
    Screen.ROUTINE: render_routine,
    Screen.STUDY: render_study,
    Screen.PROGRESS: render_progress,
    Screen.PROFILE: render_profile,
}
