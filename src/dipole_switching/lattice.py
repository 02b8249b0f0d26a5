"""
Lattice of bistable dipoles with an incrementally tracked switching frontier.

Layout:
    - width * height cells, row-major, index = x + y * width
    - No wraparound: edge cells have fewer than 4 neighbours
    - Neighbour order is north, west, east, south

State:
    - cells: bool array, True = up, False = down
    - frontier: {cell index: accumulated activation weight} for cells
      whose polarization opposes the field that last updated them
    - polarization_counter: sum of +1 (up) / -1 (down) over all cells,
      maintained incrementally by +-2 per flip

Randomness is always passed in as a numpy Generator; the lattice holds no
RNG of its own.
"""

import numpy as np
from typing import Dict, Iterator, List, Optional, Tuple

from .activation import ActivationFunc, flip_probability
from .config import LatticeConfig
from .exceptions import InvalidConfigurationError, PolarizationInvariantError
from .field import FieldTendency

Coord = Tuple[int, int]
Neighbours = Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]
Frontier = Dict[int, float]

# Positions within Neighbours that couple along y (north, south) vs x (west, east)
VERTICAL_SLOTS = (0, 3)
HORIZONTAL_SLOTS = (1, 2)


def charge(polarization: bool) -> int:
    return 1 if polarization else -1


class CellBox:
    """
    2-D grid of dipoles plus the sparse frontier of flip candidates.

    Attributes:
        width, height: Grid dimensions (both >= 1).
        cells: Boolean polarization per cell (True = up).
        frontier: Next-generation flip candidates and their weights.
        polarization_counter: Net polarization, sum of +-1 per cell.
        x_spread: Coupling added to horizontal neighbours on a flip.
        y_spread: Coupling added to vertical neighbours on a flip.
        activation_func: Maps accumulated weight to coupling strength.
    """

    def __init__(
        self,
        width: int,
        height: int,
        x_spread: float = 1.0,
        y_spread: float = 0.5,
        activation_func: ActivationFunc = ActivationFunc.QUADRATIC
    ):
        if width < 1 or height < 1:
            raise InvalidConfigurationError(
                f"Lattice must have positive area, got {width}x{height}"
            )
        self.width = width
        self.height = height
        self.x_spread = x_spread
        self.y_spread = y_spread
        self.activation_func = activation_func
        self.clear()

    @classmethod
    def from_config(cls, config: LatticeConfig) -> "CellBox":
        return cls(
            config.width,
            config.height,
            x_spread=config.x_spread,
            y_spread=config.y_spread,
            activation_func=ActivationFunc.from_name(config.activation_func)
        )

    def clear(self) -> None:
        """All cells down, empty frontier, counter at -(width*height)."""
        self.cells = np.zeros(self.width * self.height, dtype=bool)
        self.frontier: Frontier = {}
        self.polarization_counter = -self.n_cells

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def index2coord(self, i: int) -> Coord:
        return i % self.width, i // self.width

    def coord2index(self, coord: Coord) -> Optional[int]:
        """Flat index of (x, y), or None outside [0, width) x [0, height)."""
        x, y = coord
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        return x + y * self.width

    def get_neighbours(self, i: int) -> Neighbours:
        """Von Neumann neighbours of cell i as (north, west, east, south)."""
        x, y = self.index2coord(i)
        return (
            self.coord2index((x, y - 1)),
            self.coord2index((x - 1, y)),
            self.coord2index((x + 1, y)),
            self.coord2index((x, y + 1)),
        )

    def coupling_coefficient(self, slot: int) -> float:
        if slot in VERTICAL_SLOTS:
            return self.y_spread
        if slot in HORIZONTAL_SLOTS:
            return self.x_spread
        raise IndexError(f"Neighbour slot out of range: {slot}")

    # ------------------------------------------------------------------
    # Cell queries
    # ------------------------------------------------------------------

    def get_polarization(self, i: int) -> int:
        return charge(bool(self.cells[i]))

    def opposes(self, i: int, field: float) -> bool:
        """True if cell i points against the sign of field (never for field 0)."""
        return field * self.get_polarization(i) < 0.0

    def frontier_items(self) -> Iterator[Tuple[int, float]]:
        """Read-only view of (cell index, weight) pairs for renderers."""
        return iter(list(self.frontier.items()))

    def count_up(self) -> int:
        return int(np.count_nonzero(self.cells))

    # ------------------------------------------------------------------
    # Flipping and propagation
    # ------------------------------------------------------------------

    def random_activate(self, rng: np.random.Generator, field: float) -> int:
        """
        Try to flip one uniformly chosen cell toward the sign of field.

        The cell flips only if it opposes field; otherwise nothing changes.

        Returns:
            The sampled index, whether or not a flip happened.
        """
        i = int(rng.integers(0, self.n_cells))
        if self.opposes(i, field):
            self.activate_cell(i, field, {})
        return i

    def activate_cell(self, cell_id: int, field: float, old_frontier: Frontier) -> None:
        """
        Flip cell_id to the sign of field and seed its neighbours.

        Args:
            cell_id: Cell to flip. Must currently oppose field.
            field: Field that drives the flip; only its sign is used.
            old_frontier: Previous-generation weights carried into neighbours.

        Raises:
            PolarizationInvariantError: If the cell already matches field.
        """
        activation = field > 0.0
        if bool(self.cells[cell_id]) == activation or field == 0.0:
            raise PolarizationInvariantError(
                f"Cell {cell_id} cannot flip toward field {field}: "
                f"polarization is already {charge(bool(self.cells[cell_id])):+d}"
            )

        self.cells[cell_id] = activation
        self.polarization_counter += 2 * charge(activation)
        # an aligned cell is no longer a candidate, even if a neighbour queued it this tick
        self.frontier.pop(cell_id, None)
        self.activate_neighbours(cell_id, field, old_frontier)

    def activate_neighbours(self, cell_id: int, field: float, old_frontier: Frontier) -> None:
        """
        Add coupling weight to every in-bounds neighbour that opposes field.

        Each contribution is coupling + old_frontier.get(neighbour, 0) and
        contributions within a tick sum.
        """
        for slot, n_id in enumerate(self.get_neighbours(cell_id)):
            if n_id is None or not self.opposes(n_id, field):
                continue
            increment = self.coupling_coefficient(slot) + old_frontier.get(n_id, 0.0)
            self.frontier[n_id] = self.frontier.get(n_id, 0.0) + increment

    def step(self, field: float, tendency: FieldTendency, rng: np.random.Generator) -> int:
        """
        Advance the frontier by one tick.

        Stable field: every old-frontier cell that still opposes field draws
        one uniform sample and flips with the activation probability;
        survivors carry their weight into the next frontier, aligned cells
        are dropped.

        Reversal: no flips. Neighbours of every old-frontier cell are primed
        for the post-reversal sign instead.

        Returns:
            Number of cells flipped this tick.
        """
        old_frontier = self.frontier
        self.frontier = {}
        flips = 0

        if tendency is FieldTendency.STABLE:
            for cell_id, weight in old_frontier.items():
                if not self.opposes(cell_id, field):
                    continue
                p = flip_probability(weight, field, self.activation_func)
                if rng.random() < p:
                    self.activate_cell(cell_id, field, old_frontier)
                    flips += 1
                else:
                    self.frontier[cell_id] = self.frontier.get(cell_id, 0.0) + weight
        else:
            effective_field = tendency.effective_field
            for cell_id in old_frontier:
                self.activate_neighbours(cell_id, effective_field, old_frontier)

        return flips

    def check_invariants(self, field: Optional[float] = None) -> List[str]:
        """
        Scan the full lattice for broken invariants (tests and debugging).

        Args:
            field: If given, every frontier cell must oppose it.

        Returns:
            Human-readable violations; empty when consistent.
        """
        problems = []
        expected = 2 * self.count_up() - self.n_cells
        if self.polarization_counter != expected:
            problems.append(
                f"polarization_counter={self.polarization_counter}, cells sum to {expected}"
            )
        if abs(self.polarization_counter) > self.n_cells:
            problems.append("polarization_counter outside [-N, N]")
        for cell_id, weight in self.frontier.items():
            if not 0 <= cell_id < self.n_cells:
                problems.append(f"frontier index {cell_id} out of range")
            elif field is not None and not self.opposes(cell_id, field):
                problems.append(f"frontier cell {cell_id} already aligned with {field}")
            if weight < 0:
                problems.append(f"frontier cell {cell_id} has negative weight {weight}")
        return problems

    def __repr__(self) -> str:
        return (
            f"CellBox({self.width}x{self.height}, counter={self.polarization_counter}, "
            f"frontier={len(self.frontier)})"
        )
