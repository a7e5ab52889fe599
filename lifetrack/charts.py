"""Matplotlib charts for the progress screen.

All figures use a dark theme consistent with the GUI palette.
"""

from __future__ import annotations

import io

import matplotlib
matplotlib.use("Agg")  # non-interactive backend -- render to image buffers
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from PIL import Image

# -- Palette (matches GUI dark theme) ------------------------------------
_BG = "#2b2b2b"
_FG = "#e0e0e0"
_ACCENT = "#6a9fb5"
_GOLD = "#e8c547"
_DIM_BAR = (1.0, 1.0, 1.0, 0.2)
_GRID = "#444444"

_WEEKDAYS = ["M", "T", "W", "T", "F", "S", "S"]


def _fig_to_pil(fig: Figure, dpi: int = 100) -> Image.Image:
    """Render a matplotlib Figure to a PIL Image and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight",
                facecolor=fig.get_facecolor(), edgecolor="none")
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf)


def weekly_consistency(
    minutes: list[int],
    *,
    title: str = "Weekly Consistency",
    size: tuple[int, int] = (460, 200),
    dpi: int = 100,
) -> Image.Image:
    """Bar chart of study minutes per weekday (Mon..Sun).

    The best day of the week is drawn in gold, the rest in translucent white.
    """
    if len(minutes) != 7:
        raise ValueError("expected seven daily totals, Monday first")

    values = np.array(minutes, dtype=float)
    peak = values.max() if values.any() else 0.0
    colours = [_GOLD if peak and v == peak else _DIM_BAR for v in values]

    fig_w, fig_h = size[0] / dpi, size[1] / dpi
    fig = Figure(figsize=(fig_w, fig_h), dpi=dpi, facecolor=_BG)
    ax = fig.add_subplot(111)
    ax.set_facecolor(_BG)

    x = np.arange(7)
    ax.bar(x, values, width=0.35, color=colours)
    ax.set_xticks(x)
    ax.set_xticklabels(_WEEKDAYS, color=_FG, fontsize=8)
    ax.set_ylim(0, max(peak * 1.15, 25))
    ax.set_ylabel("Minutes", color=_FG, fontsize=8)
    ax.set_title(title, color=_FG, fontsize=11, fontweight="bold")

    ax.tick_params(colors=_FG, labelsize=8)
    ax.spines["bottom"].set_color(_GRID)
    ax.spines["left"].set_color(_GRID)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.yaxis.grid(color=_GRID, linewidth=0.5)

    return _fig_to_pil(fig, dpi=dpi)


def life_balance(
    study_share: float,
    *,
    size: tuple[int, int] = (460, 70),
    dpi: int = 100,
) -> Image.Image:
    """Horizontal bar showing the study share against wellness."""
    share = min(max(study_share, 0.0), 1.0)

    fig_w, fig_h = size[0] / dpi, size[1] / dpi
    fig = Figure(figsize=(fig_w, fig_h), dpi=dpi, facecolor=_BG)
    ax = fig.add_subplot(111)
    ax.set_facecolor(_BG)

    ax.barh([0], [1.0], color=_DIM_BAR, height=0.4)
    ax.barh([0], [share], color=_ACCENT, height=0.4)
    ax.set_xlim(0, 1)
    ax.set_yticks([])
    ax.set_xticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.set_title(f"Study vs. Wellness  {share * 100:.0f}%", color=_FG, fontsize=9)

    return _fig_to_pil(fig, dpi=dpi)
