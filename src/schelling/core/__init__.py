"""
Core engine primitives.

This layer knows NOTHING about rendering, colors, or timers.
It only knows:
- A square grid of cells (RED, BLUE, EMPTY)
- The Moore neighborhood of a cell, clipped at the edges
- Whether an agent is dissatisfied with its neighbors
- How one step relocates dissatisfied agents to vacancies
"""

from schelling.core.grid import AGENT_KINDS, MOORE_OFFSETS, CellKind, Grid, Position
from schelling.core.engine import (
    ConfigurationError,
    EngineConfig,
    SegregationEngine,
    StepStats,
    place_agents,
    populate_grid,
    validate_distribution,
    validate_threshold,
)

__all__ = [
    "AGENT_KINDS",
    "MOORE_OFFSETS",
    "CellKind",
    "Grid",
    "Position",
    "ConfigurationError",
    "EngineConfig",
    "SegregationEngine",
    "StepStats",
    "place_agents",
    "populate_grid",
    "validate_distribution",
    "validate_threshold",
]
