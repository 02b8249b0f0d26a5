"""
Dipole Switching Simulation

Stochastic domain nucleation and growth in a 2-D lattice of bistable
dipoles driven by a periodically reversing external field.

Units:
    - Time: ticks (one Simulation.step); simulated time = ticks * dt
    - Field: arbitrary units, square wave of +-amplitude
    - Polarization: dimensionless, in [-1, 1]
"""

__version__ = "0.1.0"

from .activation import ActivationFunc, flip_probability, list_activation_functions
from .field import FieldGenerator, FieldTendency
from .lattice import CellBox
from .germs import (
    GermGenesis,
    StartRandom,
    StartFixed,
    ContinuousRandom,
    create_germ_genesis
)
from .simulation import Simulation
from .runner import SimulationRunner, SimulationResult, StepRecord, run_simulation
from .exceptions import PolarizationInvariantError, InvalidConfigurationError

# Config exports
from .config import (
    SimulationConfig,
    FieldConfig,
    LatticeConfig,
    GermConfig,
    RunConfig,
    OutputConfig,
    load_config
)
from .session import save_session, load_session
