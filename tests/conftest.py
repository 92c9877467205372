"""
Pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def reference_grid():
    """The 3x3 grid [[R, R, E], [E, B, E], [R, E, B]]."""
    from schelling.core import CellKind, Grid
    R, B, E = CellKind.RED, CellKind.BLUE, CellKind.EMPTY
    return Grid.from_kinds([
        [R, R, E],
        [E, B, E],
        [R, E, B],
    ])


@pytest.fixture
def small_engine(rng):
    """A 10x10 engine with 30 red and 30 blue agents."""
    from schelling.core import SegregationEngine
    engine = SegregationEngine(rng=rng, threshold=0.5)
    engine.initialize(100, 0.3, 0.3)
    return engine
