"""Matplotlib chart of the last seven days of focus sessions.

Colours follow the selected app theme.
"""

from __future__ import annotations

import io
from datetime import date

import matplotlib
matplotlib.use("Agg")  # non-interactive backend -- render to image buffers
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from PIL import Image

from focusgarden.models import ThemeName
from focusgarden.stats import histogram_days

# -- Palettes: (background, text, accent, grid) ----------------------------
_PALETTES: dict[ThemeName, tuple[str, str, str, str]] = {
    ThemeName.CUTE: ("#fde4cf", "#5c5c5c", "#ff8a80", "#a7a7a7"),
    ThemeName.DARK: ("#2c3e50", "#ecf0f1", "#e67e22", "#95a5a6"),
    ThemeName.FOREST: ("#141517", "#f2f2f2", "#a6ffcb", "#a9a9a9"),
}


def _fig_to_pil(fig: Figure, dpi: int = 100) -> Image.Image:
    """Render a matplotlib Figure to a PIL Image and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight",
                facecolor=fig.get_facecolor(), edgecolor="none")
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf)


def weekly_focus_chart(
    counts: list[int],
    reference_date: date,
    *,
    theme: ThemeName = ThemeName.CUTE,
    title: str = "Focus Sessions (Last 7 Days)",
    size: tuple[int, int] = (560, 260),
    dpi: int = 100,
) -> Image.Image:
    """Line chart of daily session counts, oldest day on the left.

    Parameters
    ----------
    counts:
        Seven bucket values as produced by ``compute_daily_histogram``.
    reference_date:
        The last (rightmost) day; used for the weekday labels.
    """
    bg, fg, accent, grid = _PALETTES[theme]
    days = histogram_days(reference_date)
    xs = np.arange(len(counts))

    fig = Figure(figsize=(size[0] / dpi, size[1] / dpi), dpi=dpi, facecolor=bg)
    ax = fig.add_subplot(111)
    ax.set_facecolor(bg)

    ax.plot(xs, counts, color=accent, linewidth=2, marker="o", markersize=6,
            markerfacecolor=fg, markeredgecolor=accent, markeredgewidth=1.5)
    ax.fill_between(xs, counts, alpha=0.15, color=accent)

    ax.set_xticks(xs)
    ax.set_xticklabels([d.strftime("%a") for d in days[-len(counts):]], color=fg, fontsize=8)
    top = max(counts, default=0)
    ax.set_ylim(0, max(top + 1, 2))
    ax.set_ylabel("Sessions", color=fg, fontsize=9)
    ax.set_title(title, color=fg, fontsize=11, fontweight="bold")

    ax.tick_params(colors=fg, labelsize=8)
    ax.spines["bottom"].set_color(grid)
    ax.spines["left"].set_color(grid)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.yaxis.grid(color=grid, linewidth=0.5)

    return _fig_to_pil(fig, dpi=dpi)
