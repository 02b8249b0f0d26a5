"""
Tests for nucleation policies.
"""

import numpy as np
import pytest

from dipole_switching.config import GermConfig
from dipole_switching.germs import (
    ContinuousRandom,
    GermGenesis,
    StartFixed,
    StartRandom,
    create_germ_genesis,
)
from dipole_switching.lattice import CellBox


class TestStartRandom:
    """Tests for reseeding on every reversal."""

    def test_activate_start_flips_up_to_number(self):
        box = CellBox(10, 10)
        StartRandom(number=3).activate_start(1.0, box, np.random.default_rng(4))
        assert 1 <= box.count_up() <= 3
        assert box.check_invariants() == []

    def test_exact_sites(self, scripted_rng):
        box = CellBox(5, 5)
        rng = scripted_rng(indices=[0, 12, 24])
        StartRandom(number=3).activate_start(1.0, box, rng)
        assert np.flatnonzero(box.cells).tolist() == [0, 12, 24]

    def test_tick_and_once_are_noops(self):
        box = CellBox(4, 4)
        germ = StartRandom(number=3)
        rng = np.random.default_rng(0)
        germ.activate_once(box, rng)
        germ.tick(1.0, box, rng)
        assert box.count_up() == 0
        assert box.frontier == {}


class TestStartFixed:
    """Tests for permanent defect sites."""

    def test_activate_once_records_2n_sites(self):
        box = CellBox(10, 10)
        germ = StartFixed(number=4)
        germ.activate_once(box, np.random.default_rng(3))

        expected_rng = np.random.default_rng(3)
        expected = [int(expected_rng.integers(0, 100)) for _ in range(8)]
        assert germ.fixed_sites == expected

    def test_only_positive_half_flips_fresh_lattice(self, scripted_rng):
        box = CellBox(4, 4)
        rng = scripted_rng(indices=[1, 2, 5, 10])
        germ = StartFixed(number=2)
        germ.activate_once(box, rng)
        # sites 1, 2 were sampled under -1 on an all-down lattice
        assert germ.fixed_sites == [1, 2, 5, 10]
        assert np.flatnonzero(box.cells).tolist() == [5, 10]

    def test_activate_once_replaces_previous_sites(self):
        box = CellBox(6, 6)
        germ = StartFixed(number=2)
        rng = np.random.default_rng(9)
        germ.activate_once(box, rng)
        box.clear()
        germ.activate_once(box, rng)
        assert len(germ.fixed_sites) == 4

    def test_tick_pins_weight_to_zero(self, scripted_rng):
        box = CellBox(4, 4)
        germ = StartFixed(number=1)
        germ.activate_once(box, scripted_rng(indices=[3, 9]))
        box.frontier[9] = 7.5
        germ.tick(1.0, box, np.random.default_rng(0))
        assert box.frontier[3] == 0.0
        assert box.frontier[9] == 0.0

    def test_activate_start_is_noop(self):
        box = CellBox(4, 4)
        StartFixed(number=3).activate_start(1.0, box, np.random.default_rng(0))
        assert box.count_up() == 0


class TestContinuousRandom:
    """Tests for per-tick random nucleation."""

    def test_zero_chance_never_fires(self):
        box = CellBox(8, 8)
        germ = ContinuousRandom(chance=0.0)
        rng = np.random.default_rng(2)
        for _ in range(500):
            germ.tick(1.0, box, rng)
        assert box.count_up() == 0

    def test_certain_chance_fires_every_tick(self, scripted_rng):
        box = CellBox(8, 8)
        rng = scripted_rng(uniforms=[0.0], indices=[0, 9, 18])
        germ = ContinuousRandom(chance=1.0)
        for _ in range(3):
            germ.tick(1.0, box, rng)
        assert rng.random_calls == 3
        assert np.flatnonzero(box.cells).tolist() == [0, 9, 18]

    def test_one_draw_per_tick_when_not_firing(self, scripted_rng):
        box = CellBox(8, 8)
        rng = scripted_rng(uniforms=[0.9])
        ContinuousRandom(chance=0.5).tick(1.0, box, rng)
        assert rng.random_calls == 1
        assert rng.integers_calls == 0

    def test_zero_field_tick_samples_without_flipping(self, scripted_rng):
        box = CellBox(8, 8)
        rng = scripted_rng(uniforms=[0.0], indices=[5])
        ContinuousRandom(chance=1.0).tick(0.0, box, rng)
        assert rng.integers_calls == 1
        assert box.count_up() == 0


class TestFactory:
    """Tests for create_germ_genesis."""

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            GermGenesis()

    def test_policy_without_config_view_cannot_be_built(self):
        class Silent(GermGenesis):
            kind = "silent"

        with pytest.raises(TypeError):
            Silent()

    def test_kinds(self):
        assert isinstance(create_germ_genesis(GermConfig(kind="start_random", number=2)), StartRandom)
        fixed = create_germ_genesis(GermConfig(kind="start_fixed", number=2))
        assert isinstance(fixed, StartFixed)
        assert fixed.fixed_sites == []
        cont = create_germ_genesis(GermConfig(kind="continuous_random", chance=0.1))
        assert isinstance(cont, ContinuousRandom)
        assert cont.chance == 0.1

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            create_germ_genesis(GermConfig(kind="everywhere"))

    def test_round_trip_through_config(self):
        for germ in (StartRandom(number=7), StartFixed(number=2), ContinuousRandom(chance=0.25)):
            rebuilt = create_germ_genesis(germ.to_config())
            assert type(rebuilt) is type(germ)
            assert rebuilt.to_config() == germ.to_config()
