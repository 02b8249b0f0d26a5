"""
Main simulation runner.

Builds a seeded RNG and a Simulation from config, runs the requested
number of ticks and samples the polarization observable.

Units:
    - Tick: one Simulation.step
    - Time: simulated time, dt per tick
"""

import numpy as np
from typing import List, Optional
from dataclasses import dataclass

from .config import SimulationConfig
from .field import FieldTendency
from .logger import Logger
from .simulation import Simulation


@dataclass
class StepRecord:
    """
    Sampled observables after one tick.

    Attributes:
        tick: Number of ticks run so far.
        time: Simulated time (tick * dt).
        field: Field value consumed by the tick (0 on reversals and at tick 0).
        tendency: Tendency name consumed by the tick.
        polarization: Net polarization after the tick.
        frontier_size: Number of flip candidates after the tick.
        flips: Frontier-driven flips during the tick.
    """
    tick: int
    time: float
    field: float
    tendency: str
    polarization: float
    frontier_size: int
    flips: int


@dataclass
class SimulationResult:
    """
    Complete simulation results.

    Attributes:
        records: Sampled step records, starting with the reset state.
        config: Configuration used.
        final_polarization: Polarization after the last tick.
        min_polarization: Lowest sampled polarization.
        max_polarization: Highest sampled polarization.
        n_reversals: Reversal ticks executed.
        total_flips: Frontier-driven flips over the whole run.
        simulation: The simulation in its final state.
    """
    records: List[StepRecord]
    config: SimulationConfig
    final_polarization: float
    min_polarization: float
    max_polarization: float
    n_reversals: int
    total_flips: int
    simulation: Simulation


class SimulationRunner:
    """
    Runs a configured simulation and collects sampled observables.
    """

    def __init__(self, config: SimulationConfig, rng: Optional[np.random.Generator] = None):
        """
        Initialize runner with configuration.

        Args:
            config: Complete simulation configuration.
            rng: Generator to use instead of one seeded from config.run.seed.
        """
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.run.seed)
        self.simulation = Simulation.from_config(config)
        self.records: List[StepRecord] = []

    def run(self) -> SimulationResult:
        """
        Reset and run config.run.n_steps ticks.

        Returns:
            SimulationResult with all records and summary.
        """
        run_cfg = self.config.run
        every = run_cfg.ticks_per_sample
        sim = self.simulation

        Logger.log(
            f"Run start: seed={run_cfg.seed}, n_steps={run_cfg.n_steps}, "
            f"sample every {every} ticks",
            Logger.LogPriority.INFO
        )
        sim.reset(self.rng)
        self.records = []
        self._record(0, 0.0, FieldTendency.REVERSE_UP, 0)

        n_reversals = 0
        total_flips = 0
        for tick in range(1, run_cfg.n_steps + 1):
            field, tendency = sim.generator.field()
            flips = sim.step(self.rng)
            total_flips += flips
            if tendency.is_reversal:
                n_reversals += 1
                Logger.log(
                    f"Tick {tick}: field reversed {tendency.name}, "
                    f"polarization {sim.get_polarization():.4f}"
                )

            if tick % every == 0 or tick == run_cfg.n_steps:
                self._record(tick, field, tendency, flips)

        polarizations = [r.polarization for r in self.records]
        result = SimulationResult(
            records=self.records,
            config=self.config,
            final_polarization=sim.get_polarization(),
            min_polarization=min(polarizations),
            max_polarization=max(polarizations),
            n_reversals=n_reversals,
            total_flips=total_flips,
            simulation=sim
        )
        Logger.log(
            f"Run finished: final polarization {result.final_polarization:.4f}, "
            f"{n_reversals} reversals, {total_flips} flips",
            Logger.LogPriority.INFO
        )
        return result

    def _record(self, tick: int, field: float, tendency: FieldTendency, flips: int) -> None:
        sim = self.simulation
        self.records.append(StepRecord(
            tick=tick,
            time=tick * self.config.run.dt,
            field=field,
            tendency=tendency.value,
            polarization=sim.get_polarization(),
            frontier_size=len(sim.cells.frontier),
            flips=flips
        ))


def run_simulation(config: SimulationConfig) -> SimulationResult:
    """
    Convenience function to run simulation from config.

    Args:
        config: Simulation configuration.

    Returns:
        Simulation results.
    """
    runner = SimulationRunner(config)
    return runner.run()
