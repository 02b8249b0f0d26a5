"""
Periodic external field generator.

The field is a square wave driven by an integer tick counter:

    t == 0            -> (0.0,        REVERSE_UP)
    0 < t < time_up   -> (+amplitude, STABLE)
    t == time_up      -> (0.0,        REVERSE_DOWN)
    t > time_up       -> (-amplitude, STABLE)

The counter wraps to 0 once it exceeds time_up + time_down, so the
sequence of (value, tendency) pairs has period time_up + time_down + 1.
"""

from enum import Enum
from typing import Tuple

from .config import FieldConfig


class FieldTendency(Enum):
    """Whether the field holds its sign or is crossing zero this tick."""
    STABLE = "stable"
    REVERSE_UP = "reverse_up"
    REVERSE_DOWN = "reverse_down"

    @property
    def is_reversal(self) -> bool:
        return self is not FieldTendency.STABLE

    @property
    def effective_field(self) -> float:
        """
        Sign of the field right after this reversal.

        Raises:
            ValueError: For STABLE, which has no post-reversal sign.
        """
        if self is FieldTendency.REVERSE_UP:
            return 1.0
        if self is FieldTendency.REVERSE_DOWN:
            return -1.0
        raise ValueError("STABLE tendency has no reversal direction")


class FieldGenerator:
    """
    Square-wave field source.

    Attributes:
        t: Tick counter in [0, time_up + time_down].
        time_up: Ticks spent at (or reaching) positive amplitude.
        time_down: Ticks spent at negative amplitude.
        amplitude: Field magnitude during stable phases.
    """

    def __init__(self, time_up: int = 500, time_down: int = 500, amplitude: float = 0.4):
        self.t = 0
        self.time_up = time_up
        self.time_down = time_down
        self.amplitude = amplitude

    @classmethod
    def from_config(cls, config: FieldConfig) -> "FieldGenerator":
        return cls(config.time_up, config.time_down, config.amplitude)

    @property
    def period(self) -> int:
        return self.time_up + self.time_down + 1

    def tick(self) -> None:
        """Advance the counter by one, wrapping past time_up + time_down."""
        self.t += 1
        if self.t > self.time_up + self.time_down:
            self.t = 0

    def field(self) -> Tuple[float, FieldTendency]:
        """Current (value, tendency). Pure query."""
        if self.t == 0:
            return 0.0, FieldTendency.REVERSE_UP
        if self.t < self.time_up:
            return self.amplitude, FieldTendency.STABLE
        if self.t == self.time_up:
            return 0.0, FieldTendency.REVERSE_DOWN
        return -self.amplitude, FieldTendency.STABLE

    def reset(self) -> None:
        self.t = 0

    def __repr__(self) -> str:
        return (
            f"FieldGenerator(t={self.t}, time_up={self.time_up}, "
            f"time_down={self.time_down}, amplitude={self.amplitude})"
        )
