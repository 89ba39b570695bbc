"""Rendering of sampled series for the command line.

The core pipeline only produces Series; this module is one possible
consumer, drawing them with matplotlib or as ASCII text.
"""

from __future__ import annotations

import tempfile
from typing import Sequence

import matplotlib

matplotlib.use("Agg")  # Non-GUI backend, the CLI only writes files
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .config import (  # noqa: E402
    DEFAULT_X_MAX,
    DEFAULT_X_MIN,
    PLOT_BACKGROUND,
    PLOT_FOREGROUND,
    PLOT_GRID_COLOR,
    PLOT_LINE_WIDTH,
)
from .logging_config import get_logger  # noqa: E402
from .types import Domain, Series  # noqa: E402

logger = get_logger("plotting")

ASCII_MARKERS = "*o+x#@%&"


def _style_axes(ax) -> None:
    ax.set_facecolor(PLOT_BACKGROUND)
    ax.grid(True, color=PLOT_GRID_COLOR)
    ax.axhline(y=0, color=PLOT_FOREGROUND, linewidth=0.8)
    ax.axvline(x=0, color=PLOT_FOREGROUND, linewidth=0.8)
    ax.tick_params(colors=PLOT_FOREGROUND)
    for spine in ax.spines.values():
        spine.set_color(PLOT_FOREGROUND)


def render_png(
    series: Sequence[Series], path: str | None = None, domain: Domain | None = None, dpi: int = 150
) -> str:
    """Draw ``series`` in the dark calculator theme and save a PNG.

    Undefined points are drawn as gaps. With no series an empty grid over
    ``domain`` (or the default viewport) is saved.

    Args:
        series: Sampled curves to draw
        path: Output file (default: a new temporary .png)
        domain: Fixes the x range to ``domain.start``..``domain.end``
        dpi: Output resolution

    Returns:
        Path of the written file
    """
    if path is None:
        temp_file = tempfile.NamedTemporaryFile(suffix=".png", delete=False)
        path = temp_file.name
        temp_file.close()

    fig, ax = plt.subplots(figsize=(6, 4))
    try:
        fig.patch.set_facecolor(PLOT_BACKGROUND)
        _style_axes(ax)
        if domain is not None:
            ax.set_xlim(domain.start, domain.end)
        elif not series:
            ax.set_xlim(DEFAULT_X_MIN, DEFAULT_X_MAX)
        if not series:
            ax.set_ylim(DEFAULT_X_MIN, DEFAULT_X_MAX)
        for s in series:
            ys = np.array([np.nan if y is None else y for y in s.ys], dtype=float)
            ax.plot(s.xs, ys, linewidth=PLOT_LINE_WIDTH, color=s.color or None, label=s.name)
        if series:
            legend = ax.legend(loc="best", facecolor=PLOT_BACKGROUND, edgecolor=PLOT_GRID_COLOR)
            for text in legend.get_texts():
                text.set_color(PLOT_FOREGROUND)
        fig.tight_layout()
        fig.savefig(path, dpi=dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    logger.info(f"Saved plot of {len(series)} function(s) to {path}")
    return path


def render_ascii(series: Sequence[Series], rows: int = 20, cols: int = 60) -> str:
    """Render ``series`` as a character grid.

    Each series gets its own marker from ASCII_MARKERS; axes are drawn
    where 0 lies inside the plotted range.

    Raises:
        ValueError: If no series has a single defined point
    """
    defined = [(p.x, p.y) for s in series for p in s.points if p.y is not None]
    if not defined:
        raise ValueError("Cannot plot: no defined points")

    all_x = [p.x for s in series for p in s.points]
    x_min, x_max = min(all_x), max(all_x)
    x_range = x_max - x_min if x_max != x_min else 1
    y_min = min(y for _, y in defined)
    y_max = max(y for _, y in defined)
    y_range = y_max - y_min if y_max != y_min else 1

    grid = [[" " for _ in range(cols)] for _ in range(rows)]

    x_axis_row = int((y_max - 0) / y_range * (rows - 1)) if y_min <= 0 <= y_max else -1
    y_axis_col = int((0 - x_min) / x_range * (cols - 1)) if x_min <= 0 <= x_max else -1
    for r in range(rows):
        for c in range(cols):
            if r == x_axis_row and c == y_axis_col:
                grid[r][c] = "+"
            elif r == x_axis_row:
                grid[r][c] = "-"
            elif c == y_axis_col:
                grid[r][c] = "|"

    for index, s in enumerate(series):
        marker = ASCII_MARKERS[index % len(ASCII_MARKERS)]
        for p in s.points:
            if p.y is None:
                continue
            col = int((p.x - x_min) / x_range * (cols - 1))
            row = int((y_max - p.y) / y_range * (rows - 1))
            grid[max(0, min(rows - 1, row))][max(0, min(cols - 1, col))] = marker

    return "\n".join("".join(line) for line in grid)
