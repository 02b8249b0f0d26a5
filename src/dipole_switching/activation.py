"""
Activation functions and the per-cell flip probability.

An activation function g maps the accumulated frontier weight of a cell
to an effective coupling strength. The probability that a frontier cell
flips during a stable tick is

    P = exp(-1 / (|E| * g(w)))

so a larger g(w) pushes the exponent toward 0 and P toward 1. These are
PURE functions; the random draw itself happens in the lattice step.

Numerical guards:
- Negative or NaN weights are clamped to 0 with a warning.
- |E| * g(w) <= 0 gives P = 0 (no flip possible, no division).
- A vanishing product gives P = 0 instead of an exp underflow warning.
"""

import math
import warnings
from enum import Enum
from typing import Callable, Dict, List

# Below this the exponent is < -1e12 and exp() is exactly 0.0 anyway
MIN_FIELD_COUPLING = 1e-12

ActivationFunction = Callable[[float], float]


def linear(x: float) -> float:
    return x


def quadratic(x: float) -> float:
    return x * x


def cubic(x: float) -> float:
    return x * x * x


def square_root(x: float) -> float:
    return math.sqrt(x)


def threshold(x: float) -> float:
    """Step at 0.5: a cell needs more than half a coupling unit to react."""
    return 1.0 if x > 0.5 else 0.0


def switch(x: float) -> float:
    """Any positive weight counts as full coupling."""
    return 1.0 if x > 0.0 else 0.0


_ACTIVATION_REGISTRY: Dict[str, ActivationFunction] = {
    "linear": linear,
    "quadratic": quadratic,
    "cubic": cubic,
    "square_root": square_root,
    "threshold": threshold,
    "switch": switch,
}


class ActivationFunc(Enum):
    """Selectable activation function, serialized by its registry name."""
    LINEAR = "linear"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"
    SQUARE_ROOT = "square_root"
    THRESHOLD = "threshold"
    SWITCH = "switch"

    def __call__(self, x: float) -> float:
        return _ACTIVATION_REGISTRY[self.value](_sanitize_weight(x))

    @classmethod
    def from_name(cls, name: str) -> "ActivationFunc":
        """
        Look up an activation function by name (case-insensitive).

        Raises:
            ValueError: If the name is not registered.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown activation function: {name!r} "
                f"(expected one of {list_activation_functions()})"
            ) from None


def list_activation_functions() -> List[str]:
    """List all registered activation function names."""
    return list(_ACTIVATION_REGISTRY.keys())


def _sanitize_weight(x: float) -> float:
    if math.isnan(x) or x < 0.0:
        warnings.warn(f"activation weight {x} clamped to 0", UserWarning)
        return 0.0
    return x


def flip_probability(weight: float, field: float, func: ActivationFunc) -> float:
    """
    Probability that a frontier cell flips in one stable tick.

    Args:
        weight: Accumulated frontier weight of the cell (>= 0).
        field: Current field value; only its magnitude matters.
        func: Activation function applied to the weight.

    Returns:
        P in [0, 1].
    """
    coupling = abs(field) * func(weight)
    if not coupling > MIN_FIELD_COUPLING:
        return 0.0
    if math.isinf(coupling):
        return 1.0
    return math.exp(-1.0 / coupling)
