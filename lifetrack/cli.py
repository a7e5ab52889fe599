"""Lifetrack CLI -- routines, focus sessions and your profile, from the terminal."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from lifetrack import display
from lifetrack.actions import Tracker
from lifetrack.config import LOG_LEVELS, normalize_log_level
from lifetrack.logging_config import configure_logging
from lifetrack.models import PROFILE_FIELDS, RoutineCreate, RoutineType, Screen, TimerState
from lifetrack.router import parse_screen
from lifetrack.scheduler import LoopScheduler
from lifetrack.store import Store

app = typer.Typer(
    name="lifetrack",
    help="Track your routines, focus sessions and study time.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"
    ),
) -> None:
    if log_level is not None and normalize_log_level(log_level) is None:
        raise typer.BadParameter(
            f"use one of {', '.join(LOG_LEVELS)}", param_hint="--log-level"
        )
    configure_logging(log_level)


def _scheduler() -> LoopScheduler:
    return LoopScheduler()


def _tracker() -> Tracker:
    """Open the store and wire up the app (convenience wrapper)."""
    return Tracker(
        Store.open(),
        _scheduler(),
        on_render=lambda _screen, content: display.print_screen(content),
    )


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


@app.command()
def show(
    screen: str = typer.Argument(
        "home", help="home, routine, study, progress or profile"
    ),
) -> None:
    """Show a screen."""
    tracker = _tracker()
    if parse_screen(screen) is None:
        display.print_warning(f"Unknown screen '{screen}'.")
        tracker.close()
        raise typer.Exit(1)
    tracker.router.navigate(screen)
    tracker.close()


# ---------------------------------------------------------------------------
# Routines
# ---------------------------------------------------------------------------


@app.command()
def toggle(
    routine_id: int = typer.Argument(..., help="ID of the routine to tick or untick"),
) -> None:
    """Mark a routine done, or not done."""
    tracker = _tracker()
    if not tracker.actions.toggle_routine_completion(routine_id):
        display.print_warning(f"Routine #{routine_id} not found.")
        tracker.close()
        raise typer.Exit(1)
    tracker.close()


@app.command(name="add-routine")
def add_routine(
    title: str = typer.Argument(..., help="What the routine is"),
    time: str = typer.Option(..., "--time", "-t", help="When, e.g. '07:00 AM'"),
    routine_type: RoutineType = typer.Option(
        RoutineType.HABIT, "--type", help="habit, study or wellness"
    ),
) -> None:
    """Add a routine."""
    tracker = _tracker()
    try:
        routine_in = RoutineCreate(title=title.strip(), time=time.strip(), type=routine_type)
    except ValidationError as exc:
        display.print_warning(f"Invalid routine: {exc.errors()[0]['msg']}")
        tracker.close()
        raise typer.Exit(1)
    routine = tracker.actions.add_routine(routine_in)
    display.print_success(f"Added routine #{routine.id}: {routine.title}")
    tracker.close()


@app.command(name="remove-routine")
def remove_routine(
    routine_id: int = typer.Argument(..., help="ID of the routine to remove"),
) -> None:
    """Remove a routine."""
    tracker = _tracker()
    if not tracker.actions.remove_routine(routine_id):
        display.print_warning(f"Routine #{routine_id} not found.")
        tracker.close()
        raise typer.Exit(1)
    display.print_success(f"Removed routine #{routine_id}.")
    tracker.close()


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@app.command(name="set")
def set_field(
    key: str = typer.Argument(..., help="name, focus or cloudUrl"),
    value: str = typer.Argument(..., help="New value (empty cloudUrl disables sync)"),
) -> None:
    """Update a profile field."""
    tracker = _tracker()
    if not tracker.actions.update_profile_field(key, value):
        display.print_warning(
            f"Unknown field '{key}'. Use one of: {', '.join(PROFILE_FIELDS)}."
        )
        tracker.close()
        raise typer.Exit(1)
    if key == "cloudUrl" and value.strip():
        display.print_info("Cloud URL updated! Try completing a routine to test sync.")
    else:
        display.print_success(f"Profile {key} updated.")
    tracker.close()


# ---------------------------------------------------------------------------
# Focus sessions
# ---------------------------------------------------------------------------


@app.command()
def focus() -> None:
    """Run a 25-minute focus session. Ctrl-C pauses."""
    tracker = _tracker()
    timer = tracker.timer
    scheduler = tracker.timer_scheduler
    logged_before = len(tracker.state.study_sessions)
    tracker.router.navigate(Screen.STUDY)

    progress = display.create_timer_progress()
    bar = progress.add_task("Focus", total=timer.session_seconds)

    def _on_tick(state: TimerState) -> None:
        progress.update(bar, completed=state.session_seconds - state.remaining_seconds)

    timer.on_tick = _on_tick
    tracker.actions.start_or_pause_timer()

    while True:
        progress.start()
        try:
            scheduler.run_until(lambda: not timer.running)
        except KeyboardInterrupt:
            tracker.actions.start_or_pause_timer()
            progress.stop()
            display.print_info(f"Paused at {timer.state.display}.")
            if typer.confirm("Resume?", default=True):
                tracker.actions.start_or_pause_timer()
                continue
            tracker.actions.cancel_timer()
            display.print_warning("Session abandoned; nothing logged.")
            break
        progress.stop()
        break

    if len(tracker.state.study_sessions) > logged_before:
        display.print_nudge("Focus Session Complete! Great job.")
    tracker.close()


@app.command()
def sessions(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of sessions to show"),
) -> None:
    """List logged focus sessions, newest first."""
    tracker = _tracker()
    recent = tracker.state.recent_sessions(limit)
    if not recent:
        display.print_info("No sessions yet.")
    for s in recent:
        when = s.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
        display.console.print(f"{when}  {s.subject}  [yellow]{s.duration_minutes} min[/yellow]")
    tracker.close()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    data_dir: Optional[str] = typer.Option(
        None, "--data-dir", help="Keep the data file in this directory"
    ),
    default_log_level: Optional[str] = typer.Option(
        None, "--default-log-level", help="Saved log level used when none is given"
    ),
    reset: bool = typer.Option(False, "--reset", help="Reset to the default data directory"),
    show_config: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where your data is stored."""
    from lifetrack import config as cfg

    if data_dir:
        result = cfg.set_data_dir(data_dir)
        display.print_success(f"Data directory set to: {result.data_dir}")
    elif default_log_level:
        try:
            result = cfg.set_log_level(default_log_level)
        except ValueError as exc:
            display.print_warning(str(exc))
            raise typer.Exit(1)
        display.print_success(f"Default log level set to: {result.log_level}")
    elif reset:
        cfg.reset_data_dir()
        display.print_success("Reset to default data directory.")
    elif show_config:
        current = cfg.load_config()
        resolved = cfg.get_db_path()
        suffix = "" if current.data_dir else " (default)"
        display.print_info(f"Data file: {resolved}{suffix}")
        display.print_info(f"Log level: {current.log_level}")
    else:
        display.print_info("Use --data-dir, --default-log-level, --reset, or --show.")


# ---------------------------------------------------------------------------
# Sheet sink & GUI
# ---------------------------------------------------------------------------


@app.command()
def sink(
    sheet_dir: Path = typer.Option(Path("sheets"), "--dir", help="Where to write the CSV sheets"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8750, "--port"),
) -> None:
    """Run a local sync endpoint that appends pushes to CSV sheets."""
    import uvicorn

    from lifetrack.sink import create_app

    display.print_info(f"Sync endpoint: http://{host}:{port}/  (sheets in {sheet_dir})")
    uvicorn.run(create_app(sheet_dir), host=host, port=port)


@app.command()
def gui() -> None:
    """Open the Lifetrack window."""
    from lifetrack.gui import run_gui

    run_gui()
