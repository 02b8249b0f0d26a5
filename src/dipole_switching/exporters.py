"""
Export simulation results to CSV and JSON.

Time series CSV columns (exact schema):
    tick, time, field, tendency, polarization, frontier_size, flips

Frontier snapshot CSV columns (renderer interface):
    index, x, y, weight, normalized_weight
"""

import csv
import json
import subprocess
from pathlib import Path
from typing import List, Optional
from datetime import datetime

from .config import config_to_dict
from .lattice import CellBox
from .runner import SimulationResult


CSV_COLUMNS = [
    "tick",
    "time",
    "field",
    "tendency",
    "polarization",
    "frontier_size",
    "flips"
]

FRONTIER_COLUMNS = ["index", "x", "y", "weight", "normalized_weight"]

# Renderers map weight / 4 onto their colour gradient
DEFAULT_WEIGHT_NORMALIZATION = 4.0


def export_csv(result: SimulationResult, path: Path) -> None:
    """
    Export sampled step records to CSV.

    Args:
        result: Simulation result.
        path: Output CSV path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)

        for rec in result.records:
            writer.writerow([
                rec.tick,
                rec.time,
                rec.field,
                rec.tendency,
                rec.polarization,
                rec.frontier_size,
                rec.flips
            ])


def frontier_snapshot(
    lattice: CellBox,
    normalization: float = DEFAULT_WEIGHT_NORMALIZATION
) -> List[dict]:
    """
    Rows describing the current frontier for a rendering collaborator.

    Args:
        lattice: Lattice to read (not modified).
        normalization: Divisor applied to weights, must be positive.

    Returns:
        One dict per frontier cell with index, grid position and weights.
    """
    if normalization <= 0:
        raise ValueError("normalization must be positive")
    rows = []
    for index, weight in lattice.frontier_items():
        x, y = lattice.index2coord(index)
        rows.append({
            "index": index,
            "x": x,
            "y": y,
            "weight": weight,
            "normalized_weight": weight / normalization
        })
    return rows


def export_frontier(
    lattice: CellBox,
    path: Path,
    normalization: float = DEFAULT_WEIGHT_NORMALIZATION
) -> None:
    """Write frontier_snapshot rows to CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = frontier_snapshot(lattice, normalization)

    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=FRONTIER_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)


def get_git_commit() -> Optional[str]:
    """Get current git commit hash if available."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode == 0:
        return result.stdout.strip()[:12]
    return None


def export_metadata(result: SimulationResult, path: Path) -> None:
    """
    Export metadata JSON with config and summary.

    Args:
        result: Simulation result.
        path: Output JSON path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    metadata = {
        "timestamp": datetime.now().isoformat(),
        "git_commit": get_git_commit(),
        "config": config_to_dict(result.config),
        "summary": {
            "n_records": len(result.records),
            "n_steps": result.config.run.n_steps,
            "final_polarization": result.final_polarization,
            "min_polarization": result.min_polarization,
            "max_polarization": result.max_polarization,
            "n_reversals": result.n_reversals,
            "total_flips": result.total_flips
        }
    }

    with open(path, 'w') as f:
        json.dump(metadata, f, indent=2)


def export_results(
    result: SimulationResult,
    out_dir: Path,
    run_name: str,
    save_frontier: bool = False
) -> dict:
    """
    Export all results to output directory.

    Args:
        result: Simulation result.
        out_dir: Output directory.
        run_name: Base name for output files.
        save_frontier: Also write the final frontier snapshot.

    Returns:
        Dict with paths to exported files.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    csv_path = out_dir / f"{run_name}.csv"
    json_path = out_dir / f"{run_name}_metadata.json"

    export_csv(result, csv_path)
    export_metadata(result, json_path)

    paths = {
        "csv": str(csv_path),
        "metadata": str(json_path)
    }
    if save_frontier:
        frontier_path = out_dir / f"{run_name}_frontier.csv"
        export_frontier(result.simulation.cells, frontier_path)
        paths["frontier"] = str(frontier_path)
    return paths
