"""
Tests for the simulation runner and run reproducibility.
"""

import numpy as np
import pytest

from dipole_switching.config import (
    FieldConfig,
    GermConfig,
    LatticeConfig,
    RunConfig,
    SimulationConfig,
)
from dipole_switching.exceptions import InvalidConfigurationError
from dipole_switching.runner import SimulationRunner, run_simulation


def small_config(seed=42, kind="start_random"):
    return SimulationConfig(
        generator=FieldConfig(time_up=20, time_down=20, amplitude=1.2),
        lattice=LatticeConfig(width=12, height=12, activation_func="linear"),
        germs=GermConfig(kind=kind, number=3, chance=0.1),
        run=RunConfig(seed=seed, n_steps=120, dt=0.01, sample_every=0.1)
    )


class TestRunner:
    """Tests for sampling and summary values."""

    def test_record_cadence(self):
        result = run_simulation(small_config())
        ticks = [r.tick for r in result.records]
        assert ticks == [0] + list(range(10, 121, 10))
        assert result.records[0].polarization == -1.0
        assert result.records[-1].time == pytest.approx(1.2)

    def test_last_tick_always_recorded(self):
        config = small_config()
        config.run.n_steps = 25
        result = run_simulation(config)
        assert [r.tick for r in result.records] == [0, 10, 20, 25]

    def test_reversal_count(self):
        result = run_simulation(small_config())
        # period 41: reversals at t = 0 and t = 20
        assert result.n_reversals == 6

    def test_summary_consistent_with_records(self):
        result = run_simulation(small_config())
        polarizations = [r.polarization for r in result.records]
        assert result.min_polarization == min(polarizations)
        assert result.max_polarization == max(polarizations)
        assert result.final_polarization == result.records[-1].polarization
        assert result.final_polarization == result.simulation.get_polarization()
        assert result.total_flips >= sum(r.flips for r in result.records)

    def test_records_tendency_names(self):
        config = small_config()
        config.run.sample_every = config.run.dt
        config.run.n_steps = 25
        result = run_simulation(config)
        by_tick = {r.tick: r for r in result.records}
        assert by_tick[1].tendency == "reverse_up"
        assert by_tick[2].tendency == "stable"
        assert by_tick[2].field == 1.2
        assert by_tick[21].tendency == "reverse_down"
        assert by_tick[22].field == -1.2

    def test_invalid_config_rejected(self):
        config = small_config()
        config.lattice.height = 0
        with pytest.raises(InvalidConfigurationError):
            SimulationRunner(config)

    def test_injected_rng(self):
        config = small_config()
        a = SimulationRunner(config, rng=np.random.default_rng(5)).run()
        b = SimulationRunner(config, rng=np.random.default_rng(5)).run()
        assert [r.polarization for r in a.records] == [r.polarization for r in b.records]


class TestReproducibility:
    """Tests for deterministic reproducibility."""

    @pytest.mark.parametrize("kind", ["start_random", "start_fixed", "continuous_random"])
    def test_same_seed_identical(self, kind):
        result1 = run_simulation(small_config(kind=kind))
        result2 = run_simulation(small_config(kind=kind))

        assert len(result1.records) == len(result2.records)
        for r1, r2 in zip(result1.records, result2.records):
            assert r1 == r2
        assert np.array_equal(result1.simulation.cells.cells, result2.simulation.cells.cells)
        assert result1.simulation.cells.frontier == result2.simulation.cells.frontier

    def test_rerun_same_runner_config(self):
        config = small_config(seed=7)
        runner = SimulationRunner(config)
        first = [r.polarization for r in runner.run().records]
        second = [r.polarization for r in run_simulation(config).records]
        assert first == second
