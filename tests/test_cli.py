"""
Tests for the command-line entry point.
"""

import json

import numpy as np
import pytest

from dipole_switching.cli import main
from dipole_switching.session import load_session

CONFIG = """
generator:
  time_up: 8
  time_down: 8
  amplitude: 1.0
lattice:
  width: 10
  height: 10
germs:
  kind: start_random
  number: 2
run:
  seed: 3
  n_steps: 30
output:
  run_name: cli_run
  save_frontier: true
"""


@pytest.fixture(autouse=True)
def log_path(tmp_path, monkeypatch):
    path = tmp_path / "cli.log"
    monkeypatch.setenv("DIPOLE_SWITCHING_LOG_PATH", str(path))
    return path


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(CONFIG)
    return path


class TestCli:
    """Tests for argument handling and exit codes."""

    def test_run_writes_outputs(self, config_path, tmp_path, capsys):
        out = tmp_path / "out"
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(config_path), "-o", str(out)])
        assert exc.value.code == 0
        assert (out / "cli_run.csv").exists()
        assert (out / "cli_run_frontier.csv").exists()
        assert "SIMULATION COMPLETE" in capsys.readouterr().out

    def test_overrides(self, config_path, tmp_path):
        out = tmp_path / "out"
        with pytest.raises(SystemExit):
            main(["-c", str(config_path), "-o", str(out), "-n", "other",
                  "--steps", "12", "--seed", "9", "-q"])
        meta = json.loads((out / "other_metadata.json").read_text())
        assert meta["config"]["run"]["n_steps"] == 12
        assert meta["config"]["run"]["seed"] == 9

    def test_quiet(self, config_path, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["-c", str(config_path), "-o", str(tmp_path / "q"), "-q"])
        assert capsys.readouterr().out == ""

    def test_missing_config(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(tmp_path / "missing.yaml")])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("generator:\n  time_up: 0\n")
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(path)])
        assert exc.value.code == 1
        assert "time_up" in capsys.readouterr().err

    def test_invalid_override(self, config_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(config_path), "--steps", "0"])
        assert exc.value.code == 1
        assert "n_steps" in capsys.readouterr().err

    def test_wrong_value_type(self, tmp_path, capsys):
        path = tmp_path / "typed.yaml"
        path.write_text("lattice:\n  width: 10\n  height: 10\n  activation_func: 3\n")
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(path), "-q"])
        assert exc.value.code == 1
        assert "activation_func must be a string" in capsys.readouterr().err

    def test_section_not_a_mapping(self, tmp_path, capsys):
        path = tmp_path / "flat.yaml"
        path.write_text("lattice: 5\n")
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(path), "-q"])
        assert exc.value.code == 1
        assert "lattice must be a mapping" in capsys.readouterr().err

    def test_save_session(self, config_path, tmp_path):
        session = tmp_path / "sessions" / "last.yaml"
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(config_path), "-o", str(tmp_path / "out"), "-q",
                  "--save-session", str(session)])
        assert exc.value.code == 0
        restored = load_session(session, np.random.default_rng(0))
        assert restored.cells.n_cells == 100
        assert restored.generator.time_up == 8
        assert restored.germ_config().number == 2
