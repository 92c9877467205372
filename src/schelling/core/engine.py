"""
SegregationEngine: Schelling's model as a steppable grid simulation.

Each step:
1. Scans every cell once, collecting vacancies and dissatisfied agents
2. Moves dissatisfied agents (in scan order) to randomly chosen vacancies
3. Stops early when vacancies run out

An agent is dissatisfied when the share of same-kind agents among its
occupied Moore neighbors is below the threshold, or when it has no occupied
neighbors at all. The engine never renders and never sleeps; a driver
decides when to call step() and reads the grid back for display.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from numbers import Integral

import numpy as np

from schelling.core.grid import AGENT_KINDS, CellKind, Grid, Position

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a simulation is configured with impossible parameters."""


@dataclass
class EngineConfig:
    """Configuration for a segregation run."""

    total_locations: int = 90000  # Candidate cells; grid side is floor(sqrt(.))
    red_fraction: float = 0.25  # Share of total_locations seeded RED
    blue_fraction: float = 0.25  # Share of total_locations seeded BLUE
    threshold: float = 0.7  # Minimum same-kind share for an agent to stay put

    def validate(self) -> None:
        """Raise ConfigurationError if this configuration cannot run."""
        validate_distribution(self.total_locations, self.red_fraction, self.blue_fraction)
        validate_threshold(self.threshold)


@dataclass
class StepStats:
    """What happened during a single step."""

    n_dissatisfied: int = 0
    n_empty: int = 0
    n_relocated: int = 0

    @property
    def stable(self) -> bool:
        """True when the step found nobody to move."""
        return self.n_dissatisfied == 0


def validate_threshold(threshold: float) -> float:
    """Check that a satisfaction threshold lies in the open interval (0, 1)."""
    if not 0.0 < threshold < 1.0:
        raise ConfigurationError(f"threshold must be in (0, 1), got {threshold}")
    return float(threshold)


def validate_distribution(
    total_locations: int,
    red_fraction: float,
    blue_fraction: float,
) -> tuple[int, int, int]:
    """
    Check a target distribution and compute the grid it implies.

    Returns:
        (side, n_red, n_blue)

    Raises:
        ConfigurationError: if the agents cannot all fit on the side² cells
            of the grid, or any argument is out of range.
    """
    if isinstance(total_locations, bool) or not isinstance(total_locations, Integral):
        raise ConfigurationError(
            f"total_locations must be an integer, got {total_locations!r}"
        )
    if total_locations <= 0:
        raise ConfigurationError(f"total_locations must be positive, got {total_locations}")
    for name, fraction in (("red_fraction", red_fraction), ("blue_fraction", blue_fraction)):
        if not 0.0 <= fraction <= 1.0:
            raise ConfigurationError(f"{name} must be in [0, 1], got {fraction}")

    side = math.isqrt(int(total_locations))
    n_red = int(red_fraction * total_locations)
    n_blue = int(blue_fraction * total_locations)

    if n_red + n_blue > side * side:
        raise ConfigurationError(
            f"cannot place {n_red} red and {n_blue} blue agents "
            f"on a {side}x{side} grid ({side * side} cells)"
        )
    return side, n_red, n_blue


def place_agents(grid: Grid, kind: CellKind, count: int, rng: np.random.Generator) -> None:
    """
    Scatter `count` agents of `kind` over Empty cells of the grid.

    Draws uniformly random cells and keeps those that are Empty, so the
    result is uniform over the vacancies.

    Raises:
        ConfigurationError: if the grid has fewer than `count` vacancies
    """
    n_empty = grid.count(CellKind.EMPTY)
    if count > n_empty:
        raise ConfigurationError(
            f"cannot place {count} {kind.name.lower()} agents: only {n_empty} empty cells"
        )
    side = grid.side
    remaining = count
    while remaining > 0:
        row = int(rng.integers(side))
        col = int(rng.integers(side))
        if grid[row, col] == CellKind.EMPTY:
            grid[row, col] = kind
            remaining -= 1


def populate_grid(
    total_locations: int,
    red_fraction: float,
    blue_fraction: float,
    rng: np.random.Generator,
) -> Grid:
    """
    Create a fresh grid with the requested distribution of agents.

    Red agents are placed first, then blue; every other cell stays Empty.
    """
    side, n_red, n_blue = validate_distribution(total_locations, red_fraction, blue_fraction)
    grid = Grid(side)
    place_agents(grid, CellKind.RED, n_red, rng)
    place_agents(grid, CellKind.BLUE, n_blue, rng)
    return grid


@dataclass
class SegregationEngine:
    """
    Owns the grid and advances it one step at a time.

    Not thread-safe: step() mutates the grid in place, so callers sharing an
    engine between threads must serialize every call.
    """

    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    threshold: float = 0.7  # Default used when step() is called without one

    # Simulation state
    grid: Grid = field(default_factory=lambda: Grid(0), init=False)
    steps_taken: int = field(default=0, init=False)
    last_step: StepStats | None = field(default=None, init=False)

    def __post_init__(self):
        self.threshold = validate_threshold(self.threshold)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        rng: np.random.Generator | None = None,
    ) -> SegregationEngine:
        """Build an engine and populate its grid from a config."""
        config.validate()
        if rng is None:
            engine = cls(threshold=config.threshold)
        else:
            engine = cls(rng=rng, threshold=config.threshold)
        engine.initialize(config.total_locations, config.red_fraction, config.blue_fraction)
        return engine

    def initialize(self, total_locations: int, red_fraction: float, blue_fraction: float) -> Grid:
        """
        (Re)build the grid with a random placement of agents.

        Args:
            total_locations: Candidate cell count; the grid is the largest
                square that fits, floor(sqrt(total_locations)) on a side
            red_fraction: Fraction of total_locations seeded RED
            blue_fraction: Fraction of total_locations seeded BLUE

        Returns:
            The new grid (owned by the engine)
        """
        self.grid = populate_grid(total_locations, red_fraction, blue_fraction, self.rng)
        self.steps_taken = 0
        self.last_step = None
        logger.info(
            "initialized %dx%d grid: %d red, %d blue, %d empty",
            self.grid.side,
            self.grid.side,
            self.grid.count(CellKind.RED),
            self.grid.count(CellKind.BLUE),
            self.grid.count(CellKind.EMPTY),
        )
        return self.grid

    def is_dissatisfied(self, position: Position, threshold: float | None = None) -> bool:
        """
        Whether the agent at `position` wants to move.

        Only occupied in-bounds neighbors are counted. An agent with no
        occupied neighbors is always dissatisfied.
        """
        threshold = self._resolve_threshold(threshold)
        kind = self.grid[position]
        if kind == CellKind.EMPTY:
            raise ValueError(f"cell {position} is empty")

        same = 0
        other = 0
        for neighbor in self.grid.neighbor_positions(*position):
            neighbor_kind = self.grid[neighbor]
            if neighbor_kind == CellKind.EMPTY:
                continue
            if neighbor_kind == kind:
                same += 1
            else:
                other += 1

        if same + other == 0:
            return True
        return same / (same + other) < threshold

    def classify(self, threshold: float | None = None) -> tuple[list[Position], list[Position]]:
        """
        Scan the grid once in row-major order.

        Returns:
            (empty_positions, dissatisfied_positions)
        """
        threshold = self._resolve_threshold(threshold)
        empty: list[Position] = []
        dissatisfied: list[Position] = []
        for position in self.grid.iter_positions():
            if self.grid[position] == CellKind.EMPTY:
                empty.append(position)
            elif self.is_dissatisfied(position, threshold):
                dissatisfied.append(position)
        return empty, dissatisfied

    def step(self, threshold: float | None = None) -> None:
        """
        Advance the world by one step.

        Every dissatisfied agent (in scan order) moves to a random vacancy
        until vacancies run out. A vacancy filled this step is not reused,
        and a cell vacated this step only becomes available next step.
        When nobody is dissatisfied the grid is left untouched.
        """
        threshold = self._resolve_threshold(threshold)
        empty, dissatisfied = self.classify(threshold)
        stats = StepStats(n_dissatisfied=len(dissatisfied), n_empty=len(empty))

        for origin in dissatisfied:
            if not empty:
                break
            target = empty.pop(int(self.rng.integers(len(empty))))
            self.grid[target] = self.grid[origin]
            self.grid[origin] = CellKind.EMPTY
            stats.n_relocated += 1

        if stats.stable and not (self.last_step is not None and self.last_step.stable):
            logger.info("stable configuration reached after %d steps", self.steps_taken)
        logger.debug(
            "step %d: %d dissatisfied, %d empty, %d relocated",
            self.steps_taken,
            stats.n_dissatisfied,
            stats.n_empty,
            stats.n_relocated,
        )
        self.last_step = stats
        self.steps_taken += 1

    def is_stable(self, threshold: float | None = None) -> bool:
        """True if no agent is dissatisfied."""
        _, dissatisfied = self.classify(threshold)
        return not dissatisfied

    def run(self, max_steps: int, threshold: float | None = None) -> dict:
        """
        Step until stable or until max_steps steps have been taken.

        Args:
            max_steps: Upper bound on steps for this call
            threshold: Satisfaction threshold (engine default if None)

        Returns:
            Statistics dictionary
        """
        threshold = self._resolve_threshold(threshold)
        n_steps = 0
        n_relocations = 0
        while n_steps < max_steps:
            self.step(threshold)
            n_steps += 1
            n_relocations += self.last_step.n_relocated
            if self.last_step.stable:
                break

        _, dissatisfied = self.classify(threshold)
        n_agents = sum(self.grid.count(kind) for kind in AGENT_KINDS)
        return {
            "n_steps": n_steps,
            "n_relocations": n_relocations,
            "stable": not dissatisfied,
            "fraction_satisfied": 1.0 - len(dissatisfied) / n_agents if n_agents else 1.0,
        }

    def read_grid(self) -> np.ndarray:
        """Read-only view of the current cells, for renderers."""
        return self.grid.view()

    def snapshot(self) -> Grid:
        """Independent copy of the current grid."""
        return self.grid.copy()

    def _resolve_threshold(self, threshold: float | None) -> float:
        if threshold is None:
            return self.threshold
        return validate_threshold(threshold)
