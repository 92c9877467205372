"""
Rendering and animation of the segregation grid.

The renderer holds no simulation logic: it reads the cell array, draws one
filled circle per cell on a fixed square canvas, and (when animating) calls
engine.step() once per timer tick before redrawing.

Canvas layout:
- canvas_size x canvas_size units, row 0 at the top
- a margin on every side
- cell size = (canvas_size - 2 * margin) / side, bumped up to
  min_cell_size when that would be smaller than one unit
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib.animation import FuncAnimation
from matplotlib.collections import PatchCollection
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from matplotlib.patches import Circle

from schelling.core.grid import CellKind

if TYPE_CHECKING:
    from schelling.core.engine import SegregationEngine
    from schelling.analysis.metrics import SegregationSummary


KIND_COLORS = {
    CellKind.RED: "red",
    CellKind.BLUE: "blue",
    CellKind.EMPTY: "white",
}

# RGBA lookup table indexed by CellKind value
_KIND_RGBA = np.array([mcolors.to_rgba(KIND_COLORS[kind]) for kind in CellKind])


@dataclass
class RenderConfig:
    """Canvas geometry and animation cadence."""

    canvas_size: float = 400.0  # Square canvas side, in drawing units
    margin: float = 50.0  # Blank border on every side
    min_cell_size: float = 2.0  # Used when the computed cell size is below 1
    interval_ms: int = 450  # Delay between animation ticks
    figsize: tuple[float, float] = (6, 6)


def compute_cell_size(
    side: int,
    canvas_size: float = 400.0,
    margin: float = 50.0,
    min_cell_size: float = 2.0,
) -> float:
    """Size of one cell on the canvas."""
    if side <= 0:
        raise ValueError(f"side must be positive, got {side}")
    size = (canvas_size - 2 * margin) / side
    if size < 1:
        size = min_cell_size
    return size


def cell_centers(side: int, cell_size: float, margin: float) -> np.ndarray:
    """
    Canvas coordinates of every cell center, in row-major order.

    Returns:
        Array of shape [side * side, 2] holding (x, y) pairs
    """
    rows, cols = np.divmod(np.arange(side * side), side)
    x = cell_size * cols + margin + cell_size / 2
    y = cell_size * rows + margin + cell_size / 2
    return np.column_stack([x, y])


def cell_colors(cells: np.ndarray) -> np.ndarray:
    """RGBA face color of every cell, in row-major order."""
    return _KIND_RGBA[np.asarray(cells, dtype=np.intp).ravel()]


def _draw_cells(ax: Axes, cells: np.ndarray, config: RenderConfig) -> PatchCollection:
    side = cells.shape[0]
    cell_size = compute_cell_size(side, config.canvas_size, config.margin, config.min_cell_size)
    circles = [Circle((x, y), cell_size / 2) for x, y in cell_centers(side, cell_size, config.margin)]
    collection = PatchCollection(circles, facecolors=cell_colors(cells), edgecolors="none")
    ax.add_collection(collection)

    ax.set_xlim(0, config.canvas_size)
    ax.set_ylim(config.canvas_size, 0)  # Row 0 at the top
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    return collection


def plot_grid(
    cells: np.ndarray,
    title: str = "",
    config: RenderConfig | None = None,
    ax: Axes | None = None,
) -> tuple[Figure, Axes]:
    """
    Draw a grid as filled circles colored by kind.

    Args:
        cells: 2D array of CellKind values (e.g. engine.read_grid())
        title: Plot title
        config: Canvas geometry (defaults if None)
        ax: Existing axes to plot on (creates new figure if None)

    Returns:
        (fig, ax) tuple
    """
    if config is None:
        config = RenderConfig()

    if ax is None:
        fig, ax = plt.subplots(figsize=config.figsize)
    else:
        fig = ax.figure

    _draw_cells(ax, cells, config)
    ax.set_title(title)
    return fig, ax


def make_frame_updater(
    engine: "SegregationEngine",
    collection: PatchCollection,
    threshold: float | None = None,
    on_stable: Callable[[], None] | None = None,
) -> Callable[[int], tuple[PatchCollection]]:
    """
    Build the per-tick callback used by animate_engine.

    Each call advances the engine one step and recolors the circles. When a
    step finds nobody to move, `on_stable` is invoked (once per call).
    """
    def update(frame: int) -> tuple[PatchCollection]:
        engine.step(threshold)
        collection.set_facecolor(cell_colors(engine.read_grid()))
        if engine.last_step.stable and on_stable is not None:
            on_stable()
        return (collection,)

    return update


def animate_engine(
    engine: "SegregationEngine",
    threshold: float | None = None,
    config: RenderConfig | None = None,
    title: str = "Simulation",
) -> FuncAnimation:
    """
    Drive the engine from a matplotlib timer.

    One step per tick (config.interval_ms apart); the timer stops once the
    grid is stable. Keep a reference to the returned animation or it will
    be garbage collected.
    """
    if config is None:
        config = RenderConfig()

    fig, ax = plt.subplots(figsize=config.figsize)
    collection = _draw_cells(ax, engine.read_grid(), config)
    ax.set_title(title)

    animation: FuncAnimation | None = None

    def stop():
        if animation is not None:
            animation.event_source.stop()

    update = make_frame_updater(engine, collection, threshold, on_stable=stop)
    animation = FuncAnimation(
        fig,
        update,
        interval=config.interval_ms,
        blit=False,
        cache_frame_data=False,
    )
    return animation


def plot_summary(
    history: Sequence["SegregationSummary"],
    title: str = "Segregation over time",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 5),
) -> tuple[Figure, Axes]:
    """
    Plot satisfied fraction and segregation index per step.

    The engine keeps no history; callers collect summaries as they step.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    steps = np.arange(len(history))
    ax.plot(steps, [s.fraction_satisfied for s in history], "b-", linewidth=2, label="Satisfied fraction")
    ax.plot(steps, [s.segregation_index for s in history], "r--", linewidth=2, label="Segregation index")

    ax.set_xlabel("Step")
    ax.set_ylim(0, 1.05)
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)

    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
