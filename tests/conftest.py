"""
Pytest configuration for dipole switching tests.

Puts src/ on sys.path so the tests run from a plain checkout, and provides
a scripted RNG stand-in for tests that need exact control over draws.
"""

import sys
import os

import pytest

_src = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from dipole_switching.logger import Logger  # noqa: E402


class ScriptedRng:
    """
    Replays fixed values for random() and integers() and counts the calls.

    Once a script runs out its last value repeats.
    """

    def __init__(self, uniforms=(0.0,), indices=(0,)):
        self.uniforms = list(uniforms)
        self.indices = list(indices)
        self.random_calls = 0
        self.integers_calls = 0

    def random(self):
        value = self.uniforms[min(self.random_calls, len(self.uniforms) - 1)]
        self.random_calls += 1
        return value

    def integers(self, low, high):
        value = self.indices[min(self.integers_calls, len(self.indices) - 1)]
        self.integers_calls += 1
        assert low <= value < high
        return value


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRng instances."""
    return ScriptedRng


@pytest.fixture(autouse=True)
def isolated_logger(monkeypatch):
    """Keep tests from writing to the default log file."""
    monkeypatch.setattr(Logger, "log_storage_strategy", None)
    monkeypatch.setattr(Logger, "is_logging_enabled", True)
    monkeypatch.setattr(Logger, "min_priority", Logger.LogPriority.DEBUG)
    monkeypatch.delenv("DIPOLE_SWITCHING_LOG_LEVEL", raising=False)
