"""
Configuration loading and validation for the dipole switching simulation.

Loads YAML config and validates all parameters against domain constraints.
Transient run state (frontier, polarization counter, fixed germ sites) is
never part of the configuration; it is rebuilt by Simulation.reset.
"""

import numbers

import yaml
from dataclasses import dataclass, field
from typing import Optional, Literal, Any, Dict
from pathlib import Path

from .activation import list_activation_functions

GermKind = Literal["start_random", "start_fixed", "continuous_random"]
GERM_KINDS = ("start_random", "start_fixed", "continuous_random")


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_types(section, ints=(), reals=(), strings=()) -> Optional[str]:
    """First field whose value has the wrong type, as an error message."""
    for name in ints:
        if not _is_int(getattr(section, name)):
            return f"{name} must be an integer"
    for name in reals:
        if not _is_real(getattr(section, name)):
            return f"{name} must be a number"
    for name in strings:
        if not isinstance(getattr(section, name), str):
            return f"{name} must be a string"
    return None


@dataclass
class FieldConfig:
    """Square-wave field parameters (ticks and field units)."""
    time_up: int = 500
    time_down: int = 500
    amplitude: float = 0.4

    def validate(self) -> tuple[bool, Optional[str]]:
        error = _check_types(self, ints=("time_up", "time_down"), reals=("amplitude",))
        if error:
            return False, error
        if self.time_up < 1:
            return False, "time_up must be >= 1"
        if self.time_down < 0:
            return False, "time_down must be non-negative"
        if self.amplitude < 0:
            return False, "amplitude must be non-negative"
        return True, None


@dataclass
class LatticeConfig:
    """Grid size and neighbour coupling."""
    width: int = 200
    height: int = 200
    x_spread: float = 1.0
    y_spread: float = 0.5
    activation_func: str = "quadratic"

    def validate(self) -> tuple[bool, Optional[str]]:
        error = _check_types(
            self,
            ints=("width", "height"),
            reals=("x_spread", "y_spread"),
            strings=("activation_func",)
        )
        if error:
            return False, error
        if self.width < 1 or self.height < 1:
            return False, "width and height must be >= 1 (zero-area lattice)"
        if self.x_spread < 0:
            return False, "x_spread must be non-negative"
        if self.y_spread < 0:
            return False, "y_spread must be non-negative"
        if self.activation_func.strip().lower() not in list_activation_functions():
            return False, f"Unknown activation_func: {self.activation_func}"
        return True, None

    @property
    def n_cells(self) -> int:
        return self.width * self.height


@dataclass
class GermConfig:
    """Nucleation policy selection and its parameter."""
    kind: GermKind = "start_random"
    number: int = 5
    chance: float = 0.0

    def validate(self) -> tuple[bool, Optional[str]]:
        error = _check_types(self, ints=("number",), reals=("chance",), strings=("kind",))
        if error:
            return False, error
        if self.kind not in GERM_KINDS:
            return False, f"Unknown germ kind: {self.kind}"
        if self.number < 0:
            return False, "number must be non-negative"
        if not 0.0 <= self.chance <= 1.0:
            return False, "chance must be in [0, 1]"
        return True, None


@dataclass
class RunConfig:
    """Run length, seed and observable sampling."""
    seed: int = 42
    n_steps: int = 1000
    dt: float = 0.01
    sample_every: float = 0.1

    def validate(self) -> tuple[bool, Optional[str]]:
        error = _check_types(self, ints=("seed", "n_steps"), reals=("dt", "sample_every"))
        if error:
            return False, error
        if self.n_steps < 1:
            return False, "n_steps must be >= 1"
        if self.dt <= 0:
            return False, "dt must be positive"
        if self.sample_every < self.dt:
            return False, "sample_every must be >= dt"
        return True, None

    @property
    def ticks_per_sample(self) -> int:
        return max(1, int(round(self.sample_every / self.dt)))


@dataclass
class OutputConfig:
    """Output configuration."""
    out_dir: str = "output"
    run_name: str = "dipole_switching_run"
    save_frontier: bool = False

    def validate(self) -> tuple[bool, Optional[str]]:
        error = _check_types(self, strings=("out_dir", "run_name"))
        if error:
            return False, error
        if not isinstance(self.save_frontier, bool):
            return False, "save_frontier must be true or false"
        if not self.run_name:
            return False, "run_name must be non-empty"
        return True, None


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""
    generator: FieldConfig = field(default_factory=FieldConfig)
    lattice: LatticeConfig = field(default_factory=LatticeConfig)
    germs: GermConfig = field(default_factory=GermConfig)
    run: RunConfig = field(default_factory=RunConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> tuple[bool, Optional[str]]:
        for section_name in ["generator", "lattice", "germs", "run", "output"]:
            section = getattr(self, section_name)
            is_valid, error = section.validate()
            if not is_valid:
                return False, f"{section_name}: {error}"
        return True, None


_SECTIONS = {
    "generator": FieldConfig,
    "lattice": LatticeConfig,
    "germs": GermConfig,
    "run": RunConfig,
    "output": OutputConfig,
}


def _section_from_dict(name: str, cls, raw: Optional[Dict[str, Any]]):
    """Build one section, ignoring unknown keys and defaulting missing ones."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid configuration: {name} must be a mapping")
    known = cls.__dataclass_fields__.keys()
    return cls(**{k: v for k, v in raw.items() if k in known})


def config_from_dict(raw: Optional[Dict[str, Any]]) -> SimulationConfig:
    """
    Build a SimulationConfig from a plain dict (no value validation).

    Unknown keys are ignored and missing keys take their defaults, so
    files written by older or newer versions still load.

    Raises:
        ValueError: If a section is present but is not a mapping.
    """
    raw = raw or {}
    return SimulationConfig(**{
        name: _section_from_dict(name, cls, raw.get(name))
        for name, cls in _SECTIONS.items()
    })


def config_to_dict(config: SimulationConfig) -> dict:
    """Convert config to serializable dict."""
    return {
        "generator": {
            "time_up": config.generator.time_up,
            "time_down": config.generator.time_down,
            "amplitude": config.generator.amplitude
        },
        "lattice": {
            "width": config.lattice.width,
            "height": config.lattice.height,
            "x_spread": config.lattice.x_spread,
            "y_spread": config.lattice.y_spread,
            "activation_func": config.lattice.activation_func
        },
        "germs": {
            "kind": config.germs.kind,
            "number": config.germs.number,
            "chance": config.germs.chance
        },
        "run": {
            "seed": config.run.seed,
            "n_steps": config.run.n_steps,
            "dt": config.run.dt,
            "sample_every": config.run.sample_every
        },
        "output": {
            "out_dir": config.output.out_dir,
            "run_name": config.output.run_name,
            "save_frontier": config.output.save_frontier
        }
    }


def load_config(path: Path) -> SimulationConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Validated SimulationConfig.

    Raises:
        ValueError: If config is invalid.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)

    if raw is not None and not isinstance(raw, dict):
        raise ValueError("Invalid configuration: top level must be a mapping")

    try:
        config = config_from_dict(raw)
    except TypeError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error}")

    return config
