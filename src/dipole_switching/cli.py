"""
Command-line interface for the dipole switching simulation.

Usage:
    dipole-switching --config examples/default.yaml --out output/
    python -m dipole_switching.cli -c examples/default.yaml --steps 5000
    dipole-switching -c examples/fixed_defects.yaml --save-session output/session.yaml
"""

import argparse
import sys
from pathlib import Path

from .config import load_config
from .exporters import export_results
from .logger import Logger
from .runner import run_simulation
from .session import save_session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Domain switching of a 2-D dipole lattice under a reversing field"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        required=True,
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--out", "-o",
        type=Path,
        default=None,
        help="Output directory (overrides config)"
    )
    parser.add_argument(
        "--name", "-n",
        type=str,
        default=None,
        help="Run name (overrides config)"
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Number of ticks (overrides config)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed (overrides config)"
    )
    parser.add_argument(
        "--save-session",
        type=Path,
        default=None,
        help="Write the final generator, lattice and germ settings to this YAML file"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress output except errors"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    Logger.initialize()

    # Load and validate config
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.steps is not None:
        config.run.n_steps = args.steps
    if args.seed is not None:
        config.run.seed = args.seed
    is_valid, error = config.validate()
    if not is_valid:
        print(f"Error: Invalid configuration: {error}", file=sys.stderr)
        sys.exit(1)

    out_dir = args.out or Path(config.output.out_dir)
    run_name = args.name or config.output.run_name

    if not args.quiet:
        print("Running dipole switching simulation...")
        print(f"  Lattice: {config.lattice.width}x{config.lattice.height} "
              f"(x_spread={config.lattice.x_spread}, y_spread={config.lattice.y_spread}, "
              f"{config.lattice.activation_func})")
        print(f"  Field: +-{config.generator.amplitude} "
              f"({config.generator.time_up} up / {config.generator.time_down} down ticks)")
        print(f"  Germs: {config.germs.kind}")
        print(f"  Steps: {config.run.n_steps}, seed {config.run.seed}")

    result = run_simulation(config)
    paths = export_results(result, out_dir, run_name, config.output.save_frontier)
    if args.save_session is not None:
        save_session(result.simulation, args.save_session)
        paths["session"] = args.save_session

    if not args.quiet:
        print()
        print("=" * 50)
        print("SIMULATION COMPLETE")
        print("=" * 50)
        print(f"  Final polarization: {result.final_polarization:+.4f}")
        print(f"  Range: [{result.min_polarization:+.4f}, {result.max_polarization:+.4f}]")
        print(f"  Reversals: {result.n_reversals}")
        print(f"  Flips: {result.total_flips}")
        print()
        print("Output files:")
        for label, path in paths.items():
            print(f"  {label}: {path}")

    sys.exit(0)


if __name__ == "__main__":
    main()
