"""
Nucleation ("germ") policies.

Germs are forced flips that seed domain growth independently of the
frontier rule. Three policies exist:

    StartRandom       N random sites every field reversal
    StartFixed        2N permanent defect sites chosen once at reset and
                      kept in the frontier every tick
    ContinuousRandom  each tick, with probability `chance`, one random site

Interface contract (called by Simulation):
    activate_once(lattice, rng)           once per reset
    tick(field, lattice, rng)             every step, after Lattice.step
    activate_start(field, lattice, rng)   on reversal ticks, after tick()

Swapping the policy discards the previous instance and everything it
tracked (e.g. a fixed-site list).
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from .config import GermConfig
from .lattice import CellBox


class GermGenesis(ABC):
    """
    Base class for nucleation policies. Every hook is a no-op by default;
    subclasses must provide to_config.
    """

    kind: str = ""

    def activate_once(self, lattice: CellBox, rng: np.random.Generator) -> None:
        """Establish persistent nucleation state after a lattice reset."""

    def activate_start(self, field: float, lattice: CellBox, rng: np.random.Generator) -> None:
        """React to a field reversal; field is the post-reversal sign (+-1)."""

    def tick(self, field: float, lattice: CellBox, rng: np.random.Generator) -> None:
        """Per-step hook, called whatever the field tendency."""

    @abstractmethod
    def to_config(self) -> GermConfig:
        """Configuration describing this policy (never its transient state)."""


@dataclass
class StartRandom(GermGenesis):
    """Seed `number` random sites under the new field each reversal."""
    number: int = 5
    kind = "start_random"

    def activate_start(self, field: float, lattice: CellBox, rng: np.random.Generator) -> None:
        for _ in range(self.number):
            lattice.random_activate(rng, field)

    def to_config(self) -> GermConfig:
        return GermConfig(kind=self.kind, number=self.number)


@dataclass
class StartFixed(GermGenesis):
    """
    Permanent defects: `number` sites sampled under field -1, then `number`
    under field +1. Their frontier weight is pinned to 0 every tick so they
    never leave the frontier and never accumulate weight.
    """
    number: int = 5
    fixed_sites: List[int] = field(default_factory=list)
    kind = "start_fixed"

    def activate_once(self, lattice: CellBox, rng: np.random.Generator) -> None:
        self.fixed_sites = []
        for polarity in (-1.0, 1.0):
            for _ in range(self.number):
                self.fixed_sites.append(lattice.random_activate(rng, polarity))

    def tick(self, field: float, lattice: CellBox, rng: np.random.Generator) -> None:
        for site in self.fixed_sites:
            lattice.frontier[site] = 0.0

    def to_config(self) -> GermConfig:
        return GermConfig(kind=self.kind, number=self.number)


@dataclass
class ContinuousRandom(GermGenesis):
    """Each tick, with probability `chance`, try one random site."""
    chance: float = 0.0
    kind = "continuous_random"

    def tick(self, field: float, lattice: CellBox, rng: np.random.Generator) -> None:
        if rng.random() < self.chance:
            lattice.random_activate(rng, field)

    def to_config(self) -> GermConfig:
        return GermConfig(kind=self.kind, chance=self.chance)


def create_germ_genesis(config: GermConfig) -> GermGenesis:
    """
    Factory function to create a nucleation policy from config.

    Args:
        config: Germ configuration.

    Returns:
        Fresh policy instance with no recorded sites.
    """
    if config.kind == "start_random":
        return StartRandom(number=config.number)
    elif config.kind == "start_fixed":
        return StartFixed(number=config.number)
    elif config.kind == "continuous_random":
        return ContinuousRandom(chance=config.chance)
    else:
        raise ValueError(f"Unknown germ kind: {config.kind}")
