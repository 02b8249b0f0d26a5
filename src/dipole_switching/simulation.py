"""
Tick driver combining the field generator, the lattice and the germ policy.

Order of one step (fixed):
    1. read (field, tendency) from the generator
    2. advance the generator
    3. Lattice.step(field, tendency)
    4. GermGenesis.tick(field)
    5. on reversal ticks, GermGenesis.activate_start(post-reversal sign)

Only configuration is persistent; the frontier, the polarization counter
and fixed germ sites are rebuilt by reset().
"""

import numpy as np
from typing import Optional

from .config import SimulationConfig, FieldConfig, LatticeConfig, GermConfig
from .exceptions import InvalidConfigurationError
from .field import FieldGenerator, FieldTendency
from .germs import GermGenesis, StartRandom, create_germ_genesis
from .lattice import CellBox
from .logger import Logger


class Simulation:
    """
    One field generator, one lattice, one nucleation policy.
    """

    def __init__(
        self,
        generator: Optional[FieldGenerator] = None,
        cells: Optional[CellBox] = None,
        germs: Optional[GermGenesis] = None
    ):
        self.generator = generator if generator is not None else FieldGenerator()
        self.cells = cells if cells is not None else CellBox(200, 200)
        self.germs = germs if germs is not None else StartRandom()
        self._validate()

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "Simulation":
        """
        Build a simulation from validated configuration.

        Raises:
            InvalidConfigurationError: If any section fails validation.
        """
        is_valid, error = config.validate()
        if not is_valid:
            raise InvalidConfigurationError(f"Invalid configuration: {error}")
        return cls(
            generator=FieldGenerator.from_config(config.generator),
            cells=CellBox.from_config(config.lattice),
            germs=create_germ_genesis(config.germs)
        )

    def _validate(self) -> None:
        for section_name, section in (
            ("generator", self.field_config()),
            ("lattice", self.lattice_config()),
            ("germs", self.germs.to_config()),
        ):
            is_valid, error = section.validate()
            if not is_valid:
                raise InvalidConfigurationError(f"{section_name}: {error}")

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, rng: np.random.Generator) -> int:
        """
        Run one tick.

        Args:
            rng: Generator consumed for every stochastic decision this tick.

        Returns:
            Number of frontier-driven flips in the lattice step.
        """
        field, tendency = self.generator.field()
        self.generator.tick()

        flips = self.cells.step(field, tendency, rng)
        self.germs.tick(field, self.cells, rng)
        if tendency is not FieldTendency.STABLE:
            self.germs.activate_start(tendency.effective_field, self.cells, rng)
        return flips

    def get_polarization(self) -> float:
        """Net polarization in [-1, 1]."""
        return self.cells.polarization_counter / self.cells.n_cells

    def reset(self, rng: np.random.Generator) -> None:
        """Clear the lattice, re-seed fixed germs and rewind the field."""
        self._validate()
        self.cells.clear()
        self.germs.activate_once(self.cells, rng)
        self.generator.reset()
        Logger.log(
            f"Simulation reset: {self.cells.width}x{self.cells.height}, "
            f"germs={self.germs.kind}, {self.generator}",
            Logger.LogPriority.INFO
        )

    # ------------------------------------------------------------------
    # Runtime reconfiguration
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int, rng: np.random.Generator) -> None:
        """Replace the lattice with a new size, keeping coupling settings, and reset."""
        self.cells = CellBox(
            width,
            height,
            x_spread=self.cells.x_spread,
            y_spread=self.cells.y_spread,
            activation_func=self.cells.activation_func
        )
        Logger.log(f"Lattice resized to {width}x{height}", Logger.LogPriority.INFO)
        self.reset(rng)

    def set_germ_genesis(self, germs: GermGenesis, rng: np.random.Generator) -> None:
        """
        Swap the nucleation policy (dropping the old one's state) and reset.

        Raises:
            InvalidConfigurationError: If the new policy fails validation;
                the current policy and lattice are left untouched.
        """
        is_valid, error = germs.to_config().validate()
        if not is_valid:
            raise InvalidConfigurationError(f"germs: {error}")
        Logger.log(
            f"Germ policy changed: {self.germs.kind} -> {germs.kind}",
            Logger.LogPriority.INFO
        )
        self.germs = germs
        self.reset(rng)

    # ------------------------------------------------------------------
    # Configuration views
    # ------------------------------------------------------------------

    def field_config(self) -> FieldConfig:
        return FieldConfig(
            time_up=self.generator.time_up,
            time_down=self.generator.time_down,
            amplitude=self.generator.amplitude
        )

    def lattice_config(self) -> LatticeConfig:
        return LatticeConfig(
            width=self.cells.width,
            height=self.cells.height,
            x_spread=self.cells.x_spread,
            y_spread=self.cells.y_spread,
            activation_func=self.cells.activation_func.value
        )

    def germ_config(self) -> GermConfig:
        return self.germs.to_config()
