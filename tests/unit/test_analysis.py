"""Unit tests for analysis module."""

import numpy as np
import pytest

from schelling.analysis.metrics import (
    SegregationSummary,
    count_clusters,
    dissatisfied_mask,
    fraction_satisfied,
    neighbor_counts,
    segregation_index,
    summarize,
)
from schelling.core import CellKind, Grid, SegregationEngine

R, B, E = CellKind.RED, CellKind.BLUE, CellKind.EMPTY


class TestNeighborCounts:
    """Tests for convolution-based neighbor counts."""

    def test_reference_center(self, reference_grid):
        red, blue = neighbor_counts(reference_grid.cells)
        assert red[1, 1] == 3
        assert blue[1, 1] == 1

    def test_corner_has_no_padding_agents(self):
        cells = np.full((4, 4), R, dtype=np.int8)
        red, blue = neighbor_counts(cells)
        assert red[0, 0] == 3
        assert red[0, 1] == 5
        assert red[1, 1] == 8
        assert np.all(blue == 0)

    def test_center_cell_not_counted(self):
        cells = Grid.from_kinds([
            [E, E, E],
            [E, R, E],
            [E, E, E],
        ]).cells
        red, _ = neighbor_counts(cells)
        assert red[1, 1] == 0
        assert red[0, 0] == 1


class TestDissatisfiedMask:
    """Tests for the vectorized satisfaction test."""

    def test_reference_grid(self, reference_grid):
        mask = dissatisfied_mask(reference_grid.cells, 0.5)
        expected = np.zeros((3, 3), dtype=bool)
        expected[1, 1] = True
        expected[2, 0] = True
        assert np.array_equal(mask, expected)

    def test_empty_cells_never_marked(self):
        cells = np.zeros((5, 5), dtype=np.int8)
        assert not dissatisfied_mask(cells, 0.5).any()

    def test_isolated_agent_marked(self):
        cells = np.zeros((5, 5), dtype=np.int8)
        cells[2, 2] = B
        mask = dissatisfied_mask(cells, 0.01)
        assert mask[2, 2]
        assert mask.sum() == 1

    @pytest.mark.parametrize("threshold", [0.2, 0.375, 0.5, 0.7])
    def test_matches_engine(self, threshold):
        engine = SegregationEngine(rng=np.random.default_rng(1))
        engine.initialize(225, 0.35, 0.35)

        _, dissatisfied = engine.classify(threshold)
        mask = dissatisfied_mask(engine.read_grid(), threshold)

        positions = [(int(r), int(c)) for r, c in zip(*np.nonzero(mask))]
        assert positions == dissatisfied


class TestSegregationMeasures:
    """Tests for summary statistics."""

    def test_fraction_satisfied_reference(self, reference_grid):
        # 2 of 5 agents dissatisfied
        assert np.isclose(fraction_satisfied(reference_grid.cells, 0.5), 0.6)

    def test_fraction_satisfied_no_agents(self):
        assert fraction_satisfied(np.zeros((3, 3), dtype=np.int8), 0.5) == 1.0

    def test_fully_segregated_index(self):
        cells = Grid.from_kinds([
            [R, R, E, E],
            [R, R, E, E],
            [E, E, E, E],
            [E, E, B, B],
        ]).cells
        assert segregation_index(cells) == 1.0

    def test_checkerboard_index_low(self):
        cells = np.indices((6, 6)).sum(axis=0) % 2 + 1
        # Each agent's diagonal neighbors match, orthogonal ones do not
        assert segregation_index(cells.astype(np.int8)) < 0.5

    def test_index_ignores_isolated(self):
        cells = np.zeros((5, 5), dtype=np.int8)
        cells[0, 0] = R
        assert segregation_index(cells) == 0.0

    def test_count_clusters(self):
        cells = Grid.from_kinds([
            [R, E, R, E],
            [E, E, E, E],
            [B, E, E, R],
            [E, B, E, R],
        ]).cells
        assert count_clusters(cells, R) == 3
        # Diagonal contact joins the blues
        assert count_clusters(cells, B) == 1

    def test_summarize(self, reference_grid):
        summary = summarize(reference_grid.cells, 0.5)
        assert isinstance(summary, SegregationSummary)
        assert summary.n_red == 3
        assert summary.n_blue == 2
        assert summary.n_empty == 4
        assert summary.n_dissatisfied == 2
        assert summary.red_clusters == 2
        assert summary.blue_clusters == 1

    def test_segregation_rises_over_run(self):
        engine = SegregationEngine(rng=np.random.default_rng(2), threshold=0.5)
        engine.initialize(900, 0.35, 0.35)
        before = segregation_index(engine.read_grid())

        engine.run(max_steps=100)

        assert segregation_index(engine.read_grid()) > before
