"""
Segregation measurements over a grid of cell kinds.

Everything here works on the raw cell array (as returned by
SegregationEngine.read_grid()) and never touches the engine. Neighbor counts
are computed with a 3x3 convolution padded with EMPTY, which matches the
engine's rule that out-of-bounds cells do not exist.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from schelling.core.grid import CellKind

# Moore neighborhood without the center cell
_MOORE_KERNEL = np.array(
    [[1, 1, 1],
     [1, 0, 1],
     [1, 1, 1]],
    dtype=np.int32,
)

# 8-connectivity for cluster labelling
_MOORE_STRUCTURE = np.ones((3, 3), dtype=bool)


@dataclass
class SegregationSummary:
    """Snapshot statistics of a grid."""

    n_red: int
    n_blue: int
    n_empty: int
    n_dissatisfied: int
    fraction_satisfied: float  # Satisfied agents / all agents
    segregation_index: float   # Mean same-kind neighbor share
    red_clusters: int          # 8-connected RED clusters
    blue_clusters: int         # 8-connected BLUE clusters


def neighbor_counts(cells: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Count RED and BLUE Moore neighbors of every cell.

    Args:
        cells: 2D array of CellKind values

    Returns:
        (red_counts, blue_counts), each with the shape of `cells`
    """
    red = (cells == CellKind.RED).astype(np.int32)
    blue = (cells == CellKind.BLUE).astype(np.int32)
    red_counts = ndimage.convolve(red, _MOORE_KERNEL, mode="constant", cval=0)
    blue_counts = ndimage.convolve(blue, _MOORE_KERNEL, mode="constant", cval=0)
    return red_counts, blue_counts


def _same_other(cells: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    red_counts, blue_counts = neighbor_counts(cells)
    is_red = cells == CellKind.RED
    same = np.where(is_red, red_counts, blue_counts)
    other = np.where(is_red, blue_counts, red_counts)
    return same, other


def dissatisfied_mask(cells: np.ndarray, threshold: float) -> np.ndarray:
    """
    Boolean mask of dissatisfied agents.

    Vectorized form of SegregationEngine.is_dissatisfied: an agent is
    dissatisfied when its same-kind share is below `threshold` or when it
    has no occupied neighbors. Empty cells are never marked.
    """
    occupied = cells != CellKind.EMPTY
    same, other = _same_other(cells)
    total = same + other

    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.where(total > 0, same / total, 0.0)

    return occupied & ((total == 0) | (ratio < threshold))


def fraction_satisfied(cells: np.ndarray, threshold: float) -> float:
    """Fraction of agents that are satisfied (1.0 on a grid with no agents)."""
    n_agents = int(np.count_nonzero(cells != CellKind.EMPTY))
    if n_agents == 0:
        return 1.0
    n_dissatisfied = int(np.count_nonzero(dissatisfied_mask(cells, threshold)))
    return 1.0 - n_dissatisfied / n_agents


def segregation_index(cells: np.ndarray) -> float:
    """
    Mean share of same-kind neighbors over agents with occupied neighbors.

    0.5 is roughly what a random mix of two equal groups gives; 1.0 means
    every agent sees only its own kind.
    """
    occupied = cells != CellKind.EMPTY
    same, other = _same_other(cells)
    total = same + other
    counted = occupied & (total > 0)
    if not np.any(counted):
        return 0.0
    return float(np.mean(same[counted] / total[counted]))


def count_clusters(cells: np.ndarray, kind: CellKind) -> int:
    """Number of 8-connected clusters of `kind`."""
    _, n_clusters = ndimage.label(cells == kind, structure=_MOORE_STRUCTURE)
    return int(n_clusters)


def summarize(cells: np.ndarray, threshold: float) -> SegregationSummary:
    """Compute all segregation statistics for a grid."""
    mask = dissatisfied_mask(cells, threshold)
    return SegregationSummary(
        n_red=int(np.count_nonzero(cells == CellKind.RED)),
        n_blue=int(np.count_nonzero(cells == CellKind.BLUE)),
        n_empty=int(np.count_nonzero(cells == CellKind.EMPTY)),
        n_dissatisfied=int(np.count_nonzero(mask)),
        fraction_satisfied=fraction_satisfied(cells, threshold),
        segregation_index=segregation_index(cells),
        red_clusters=count_clusters(cells, CellKind.RED),
        blue_clusters=count_clusters(cells, CellKind.BLUE),
    )
