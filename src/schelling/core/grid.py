"""
Grid: the square world of cells that agents live on.

The grid stores ONLY cell kinds:
- RED / BLUE for occupied cells
- EMPTY for vacancies

It knows nothing about thresholds or satisfaction; that lives in the engine.
Neighborhoods are always the 8-connected Moore neighborhood with hard edges
(no wraparound): cells outside the grid simply do not exist.
"""

from __future__ import annotations
from enum import IntEnum
from typing import Iterator, Sequence

import numpy as np


class CellKind(IntEnum):
    """Kind of a grid cell."""

    EMPTY = 0
    RED = 1
    BLUE = 2


AGENT_KINDS = (CellKind.RED, CellKind.BLUE)

# (drow, dcol) offsets of the Moore neighborhood
MOORE_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

Position = tuple[int, int]  # (row, col)


class Grid:
    """
    Square matrix of cell kinds, indexed by (row, col).

    Cells are kept in a small integer numpy array so that analysis code can
    work on the raw values directly.
    """

    def __init__(self, side: int):
        if side < 0:
            raise ValueError(f"side must be non-negative, got {side}")
        self.cells = np.full((side, side), CellKind.EMPTY, dtype=np.int8)

    @classmethod
    def from_kinds(cls, rows: Sequence[Sequence[CellKind]]) -> Grid:
        """Build a grid from nested rows of kinds (must be square)."""
        side = len(rows)
        if any(len(row) != side for row in rows):
            raise ValueError("rows must form a square matrix")
        grid = cls(side)
        for r, row in enumerate(rows):
            for c, kind in enumerate(row):
                grid[r, c] = CellKind(kind)
        return grid

    @property
    def side(self) -> int:
        """Side length of the grid."""
        return self.cells.shape[0]

    @property
    def shape(self) -> tuple[int, int]:
        """Return (rows, cols) grid dimensions."""
        return self.cells.shape

    @property
    def size(self) -> int:
        """Total number of cells (side²)."""
        return self.cells.size

    def __getitem__(self, position: Position) -> CellKind:
        row, col = self._check_position(position)
        return CellKind(int(self.cells[row, col]))

    def __setitem__(self, position: Position, kind: CellKind) -> None:
        row, col = self._check_position(position)
        self.cells[row, col] = kind

    def _check_position(self, position: Position) -> Position:
        # Negative indices would silently wrap in numpy
        row, col = position
        if not self.in_bounds(row, col):
            raise IndexError(f"position {position} outside {self.side}x{self.side} grid")
        return row, col

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __repr__(self) -> str:
        return f"Grid(side={self.side}, counts={self.counts()})"

    def in_bounds(self, row: int, col: int) -> bool:
        """Whether (row, col) lies inside the grid."""
        side = self.side
        return 0 <= row < side and 0 <= col < side

    def neighbor_positions(self, row: int, col: int) -> list[Position]:
        """
        Get the in-bounds Moore neighbors of a cell.

        Edge cells have 5 neighbors and corner cells 3; out-of-bounds
        positions are dropped, never wrapped or padded.
        """
        return [
            (row + dr, col + dc)
            for dr, dc in MOORE_OFFSETS
            if self.in_bounds(row + dr, col + dc)
        ]

    def iter_positions(self) -> Iterator[Position]:
        """Iterate over all (row, col) positions in row-major order."""
        for row in range(self.side):
            for col in range(self.side):
                yield row, col

    def count(self, kind: CellKind) -> int:
        """Number of cells holding the given kind."""
        return int(np.count_nonzero(self.cells == kind))

    def counts(self) -> dict[CellKind, int]:
        """Cell counts for every kind."""
        return {kind: self.count(kind) for kind in CellKind}

    def empty_positions(self) -> list[Position]:
        """All Empty positions in row-major order."""
        rows, cols = np.nonzero(self.cells == CellKind.EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def view(self) -> np.ndarray:
        """Read-only view of the cell array (no copy)."""
        view = self.cells.view()
        view.flags.writeable = False
        return view

    def copy(self) -> Grid:
        """Independent copy of this grid."""
        result = Grid(0)
        result.cells = self.cells.copy()
        return result
