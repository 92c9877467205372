"""
Visualization utilities.

- Grid rendering (one colored circle per cell)
- Timer-driven animation of a running engine
- Satisfaction / segregation curves
"""

from schelling.viz.render import (
    KIND_COLORS,
    RenderConfig,
    animate_engine,
    cell_centers,
    cell_colors,
    compute_cell_size,
    make_frame_updater,
    plot_grid,
    plot_summary,
    save_figure,
)

__all__ = [
    "KIND_COLORS",
    "RenderConfig",
    "animate_engine",
    "cell_centers",
    "cell_colors",
    "compute_cell_size",
    "make_frame_updater",
    "plot_grid",
    "plot_summary",
    "save_figure",
]
