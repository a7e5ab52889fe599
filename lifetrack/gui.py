"""Tkinter window -- same store, router and actions as the CLI."""

from __future__ import annotations

import logging
import tkinter as tk
from datetime import datetime
from tkinter import messagebox, scrolledtext, simpledialog, ttk
from typing import Optional

from PIL import Image, ImageDraw, ImageFont, ImageTk
from pydantic import ValidationError
from rich.console import RenderableType

from lifetrack.actions import Tracker
from lifetrack.charts import life_balance, weekly_consistency
from lifetrack.display import render_text
from lifetrack.models import RoutineCreate, RoutineType, Screen, SyncStatus, TimerState
from lifetrack.scheduler import TkScheduler
from lifetrack.store import Store
from lifetrack.views import timer_button_label, timer_status

log = logging.getLogger(__name__)

_BG = "#2b2b2b"
_FG = "#e0e0e0"
_ACCENT = "#6a9fb5"
_GOLD = "#e8c547"

_NAV_LABELS: dict[Screen, str] = {
    Screen.HOME: "Home",
    Screen.ROUTINE: "Routine",
    Screen.STUDY: "Study",
    Screen.PROGRESS: "Progress",
    Screen.PROFILE: "Profile",
}


class LifetrackApp:
    """Main GUI application window."""

    def __init__(self) -> None:
        self.root = tk.Tk()
        self.root.title("Lifetrack")
        self.root.geometry("520x720")
        self.root.configure(bg=_BG)
        self._set_app_icon()

        self._style = ttk.Style()
        self._style.theme_use("clam")
        self._configure_styles()

        self.tracker = Tracker(
            Store.open(), TkScheduler(self.root), on_render=self._on_render
        )
        self.actions = self.tracker.actions
        self.tracker.timer.on_tick = self._on_timer_tick
        self.tracker.timer.on_complete = self._on_session_complete
        self.tracker.sync.subscribe(
            lambda status: self.root.after(0, self._show_sync_status, status)
        )

        self._chart_images: list[ImageTk.PhotoImage] = []
        self._routine_ids: list[int] = []
        self._timer_label: Optional[ttk.Label] = None
        self._timer_status: Optional[ttk.Label] = None
        self._timer_button: Optional[ttk.Button] = None

        self._build_ui()
        self.tracker.router.navigate(Screen.HOME)

    # ------------------------------------------------------------------
    # Look and feel
    # ------------------------------------------------------------------

    def _set_app_icon(self) -> None:
        """Generate a 64x64 gold 'L' icon and apply it to the window."""
        size = 64
        img = Image.new("RGBA", (size, size), (43, 43, 43, 255))
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle([2, 2, size - 3, size - 3], radius=12, fill=_GOLD)
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", 42)
        except OSError:
            font = ImageFont.load_default(size=42)
        bbox = draw.textbbox((0, 0), "L", font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        x = (size - tw) // 2
        y = (size - th) // 2 - bbox[1]
        draw.text((x, y), "L", fill="black", font=font)
        self._icon_image = ImageTk.PhotoImage(img)
        self.root.wm_iconphoto(True, self._icon_image)

    def _configure_styles(self) -> None:
        self._style.configure("TFrame", background=_BG)
        self._style.configure(
            "TLabel", background=_BG, foreground=_FG, font=("sans-serif", 10)
        )
        self._style.configure(
            "Title.TLabel",
            background=_BG,
            foreground=_ACCENT,
            font=("sans-serif", 14, "bold"),
        )
        self._style.configure(
            "Timer.TLabel",
            background=_BG,
            foreground=_GOLD,
            font=("monospace", 36, "bold"),
        )
        self._style.configure("TButton", font=("sans-serif", 9))
        self._style.configure("Accent.TButton", font=("sans-serif", 9, "bold"))
        self._style.configure(
            "Nav.TButton", font=("sans-serif", 9), foreground="#888888"
        )
        self._style.configure(
            "ActiveNav.TButton", font=("sans-serif", 9, "bold"), foreground=_GOLD
        )

    def _build_ui(self) -> None:
        """Construct the fixed parts of the window."""
        pad = {"padx": 10, "pady": 5}

        # --- Screen content ---
        self._content = scrolledtext.ScrolledText(
            self.root,
            bg="#333",
            fg=_FG,
            font=("monospace", 9),
            wrap=tk.NONE,
            height=22,
            borderwidth=0,
            highlightthickness=0,
        )
        self._content.pack(fill=tk.BOTH, expand=True, **pad)

        # --- Screen-specific controls ---
        self._controls = ttk.Frame(self.root)
        self._controls.pack(fill=tk.X, **pad)

        # --- Status bar ---
        self._status_label = ttk.Label(self.root, text="", style="TLabel")
        self._status_label.pack(fill=tk.X, **pad)

        # --- Navigation ---
        nav = ttk.Frame(self.root)
        nav.pack(fill=tk.X, side=tk.BOTTOM, **pad)
        self._nav_buttons: dict[Screen, ttk.Button] = {}
        for screen, label in _NAV_LABELS.items():
            btn = ttk.Button(
                nav,
                text=label,
                style="Nav.TButton",
                command=lambda s=screen: self.tracker.router.navigate(s),
            )
            btn.pack(side=tk.LEFT, expand=True, fill=tk.X, padx=2)
            self._nav_buttons[screen] = btn

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_render(self, screen: Screen, content: RenderableType) -> None:
        for nav_screen, active in self.tracker.router.nav_items():
            self._nav_buttons[nav_screen].configure(
                style="ActiveNav.TButton" if active else "Nav.TButton"
            )

        self._content.configure(state=tk.NORMAL)
        self._content.delete("1.0", tk.END)
        self._content.insert(tk.END, render_text(content, width=64))
        self._content.configure(state=tk.DISABLED)

        for child in self._controls.winfo_children():
            child.destroy()
        self._timer_label = self._timer_status = self._timer_button = None
        self._chart_images.clear()

        builder = {
            Screen.HOME: self._build_home_controls,
            Screen.ROUTINE: self._build_routine_controls,
            Screen.STUDY: self._build_study_controls,
            Screen.PROGRESS: self._build_progress_controls,
            Screen.PROFILE: self._build_profile_controls,
        }[screen]
        builder()

    def _build_home_controls(self) -> None:
        ttk.Button(
            self._controls,
            text="Start Focus Session",
            style="Accent.TButton",
            command=lambda: self.tracker.router.navigate(Screen.STUDY),
        ).pack()

    def _build_routine_controls(self) -> None:
        self._routine_list = tk.Listbox(
            self._controls,
            bg="#333",
            fg=_FG,
            selectbackground=_ACCENT,
            selectforeground="#fff",
            font=("sans-serif", 10),
            activestyle="none",
            height=6,
            borderwidth=0,
            highlightthickness=0,
        )
        self._routine_ids = []
        for routine in self.tracker.state.routines:
            mark = "[x]" if routine.completed else "[ ]"
            self._routine_list.insert(tk.END, f"{mark} #{routine.id}  {routine.title}")
            if routine.completed:
                self._routine_list.itemconfig(tk.END, fg="#777777")
            self._routine_ids.append(routine.id)
        self._routine_list.bind("<Double-1>", self._on_toggle_routine)
        self._routine_list.pack(fill=tk.X)

        btn_frame = ttk.Frame(self._controls)
        btn_frame.pack(fill=tk.X, pady=(5, 0))
        ttk.Button(btn_frame, text="Toggle", command=self._on_toggle_routine).pack(
            side=tk.LEFT, padx=2
        )
        ttk.Button(btn_frame, text="+ Add routine", command=self._on_add_routine).pack(
            side=tk.LEFT, padx=2
        )
        ttk.Button(btn_frame, text="Remove", command=self._on_remove_routine).pack(
            side=tk.LEFT, padx=2
        )

    def _build_study_controls(self) -> None:
        state = self.tracker.timer.state
        self._timer_label = ttk.Label(
            self._controls, text=state.display, style="Timer.TLabel"
        )
        self._timer_label.pack()
        self._timer_status = ttk.Label(self._controls, text=timer_status(state))
        self._timer_status.pack(pady=(0, 5))

        btn_frame = ttk.Frame(self._controls)
        btn_frame.pack()
        self._timer_button = ttk.Button(
            btn_frame,
            text=timer_button_label(state),
            style="Accent.TButton",
            command=self.actions.start_or_pause_timer,
        )
        self._timer_button.pack(side=tk.LEFT, padx=2)
        ttk.Button(btn_frame, text="Reset", command=self.actions.cancel_timer).pack(
            side=tk.LEFT, padx=2
        )

    def _build_progress_controls(self) -> None:
        state = self.tracker.state
        images = [
            weekly_consistency(state.weekly_minutes(datetime.now().date())),
            life_balance(state.study_balance()),
        ]
        for image in images:
            photo = ImageTk.PhotoImage(image)
            self._chart_images.append(photo)
            tk.Label(self._controls, image=photo, bg=_BG).pack(pady=2)

    def _build_profile_controls(self) -> None:
        profile = self.tracker.state.profile
        fields = [
            ("Display Name", "name", profile.name),
            ("Focus", "focus", profile.focus),
            ("Cloud Sync URL", "cloudUrl", profile.cloud_url),
        ]
        for label, key, value in fields:
            row = ttk.Frame(self._controls)
            row.pack(fill=tk.X, pady=2)
            ttk.Label(row, text=label, width=14).pack(side=tk.LEFT)
            entry = ttk.Entry(row)
            entry.insert(0, value)
            entry.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=2)
            ttk.Button(
                row,
                text="Save",
                command=lambda k=key, e=entry: self._on_save_field(k, e.get()),
            ).pack(side=tk.LEFT)

    # ------------------------------------------------------------------
    # Routine actions
    # ------------------------------------------------------------------

    def _selected_routine_id(self) -> Optional[int]:
        sel = self._routine_list.curselection()
        if not sel:
            return None
        idx: int = sel[0]
        if idx < len(self._routine_ids):
            return self._routine_ids[idx]
        return None

    def _on_toggle_routine(self, event: Optional[tk.Event] = None) -> None:  # type: ignore[type-arg]
        routine_id = self._selected_routine_id()
        if routine_id is not None:
            self.actions.toggle_routine_completion(routine_id)

    def _on_add_routine(self) -> None:
        title = simpledialog.askstring("Add routine", "What is the routine?", parent=self.root)
        if not title or not title.strip():
            return
        when = simpledialog.askstring("Add routine", "When? (e.g. 07:00 AM)", parent=self.root)
        if not when or not when.strip():
            return
        kind = simpledialog.askstring(
            "Add routine", "Type: habit, study or wellness", initialvalue="habit", parent=self.root
        )
        try:
            routine_in = RoutineCreate(
                title=title.strip(),
                time=when.strip(),
                type=RoutineType((kind or "habit").strip().lower()),
            )
        except (ValueError, ValidationError) as exc:
            messagebox.showwarning("Add routine", str(exc), parent=self.root)
            return
        self.actions.add_routine(routine_in)

    def _on_remove_routine(self) -> None:
        routine_id = self._selected_routine_id()
        if routine_id is None:
            messagebox.showinfo("Remove", "Select a routine first.", parent=self.root)
            return
        if messagebox.askyesno("Remove", f"Remove routine #{routine_id}?", parent=self.root):
            self.actions.remove_routine(routine_id)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def _on_save_field(self, key: str, value: str) -> None:
        self.actions.update_profile_field(key, value.strip())
        if key == "cloudUrl" and value.strip():
            messagebox.showinfo(
                "Cloud Sync",
                "Cloud URL updated! Try completing a routine to test sync.",
                parent=self.root,
            )

    def _show_sync_status(self, status: SyncStatus) -> None:
        outcome = "synced" if status.ok else f"sync failed ({status.detail})"
        when = status.at.astimezone().strftime("%H:%M:%S")
        self._status_label.configure(text=f"{status.kind.value}: {outcome} at {when}")

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _on_timer_tick(self, state: TimerState) -> None:
        if self._timer_label is None:
            return
        self._timer_label.configure(text=state.display)
        if self._timer_status is not None:
            self._timer_status.configure(text=timer_status(state))
        if self._timer_button is not None:
            self._timer_button.configure(text=timer_button_label(state))

    def _on_session_complete(self, completed_at: datetime) -> None:
        self.actions.complete_timer_session(completed_at)
        self.root.bell()
        messagebox.showinfo(
            "Focus complete", "Focus Session Complete! Great job.", parent=self.root
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start the tkinter main loop."""
        self.root.mainloop()
        self.tracker.close()


def run_gui() -> None:
    """Entry point for the GUI (called from CLI)."""
    app = LifetrackApp()
    app.run()
