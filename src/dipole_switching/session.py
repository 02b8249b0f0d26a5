"""
Session save/restore.

Only configuration is stored: field generator timing and amplitude,
lattice size, coupling and activation function, and the germ policy with
its parameter. Fixed germ sites, the frontier and the polarization counter
are never written; a restored session is rebuilt by Simulation.reset, since
indices from a previous grid size would be invalid.
"""

import yaml
import numpy as np
from pathlib import Path

from .config import SimulationConfig, config_from_dict
from .exceptions import InvalidConfigurationError
from .logger import Logger
from .simulation import Simulation

SESSION_SECTIONS = ("generator", "lattice", "germs")


def session_to_dict(simulation: Simulation) -> dict:
    """Configuration-only view of a simulation."""
    lattice = simulation.lattice_config()
    germs = simulation.germ_config()
    return {
        "generator": {
            "time_up": simulation.generator.time_up,
            "time_down": simulation.generator.time_down,
            "amplitude": simulation.generator.amplitude
        },
        "lattice": {
            "width": lattice.width,
            "height": lattice.height,
            "x_spread": lattice.x_spread,
            "y_spread": lattice.y_spread,
            "activation_func": lattice.activation_func
        },
        "germs": {
            "kind": germs.kind,
            "number": germs.number,
            "chance": germs.chance
        }
    }


def save_session(simulation: Simulation, path: Path) -> None:
    """
    Write the simulation's configuration to a YAML file.

    Args:
        simulation: Simulation to persist.
        path: Destination file; parent directories are created.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(session_to_dict(simulation), f, sort_keys=False)
    Logger.log(f"Session saved to {path}", Logger.LogPriority.INFO)


def session_from_dict(raw: dict, rng: np.random.Generator) -> Simulation:
    """
    Build and reset a simulation from stored configuration.

    Missing keys take defaults and unknown keys are ignored.

    Raises:
        InvalidConfigurationError: If a section is not a mapping or its
            values have the wrong type or fail validation.
    """
    raw = raw or {}
    try:
        config: SimulationConfig = config_from_dict(
            {name: raw.get(name) for name in SESSION_SECTIONS}
        )
    except TypeError as e:
        raise InvalidConfigurationError(f"Invalid session: {e}") from e
    except ValueError as e:
        raise InvalidConfigurationError(str(e)) from e
    simulation = Simulation.from_config(config)
    simulation.reset(rng)
    return simulation


def load_session(path: Path, rng: np.random.Generator) -> Simulation:
    """
    Restore a simulation saved with save_session.

    Args:
        path: YAML session file.
        rng: Generator used by the reset that rebuilds transient state.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidConfigurationError: If the stored values fail validation.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)
    if raw is not None and not isinstance(raw, dict):
        raise InvalidConfigurationError("Invalid session: top level must be a mapping")
    simulation = session_from_dict(raw, rng)
    Logger.log(f"Session restored from {path}", Logger.LogPriority.INFO)
    return simulation
