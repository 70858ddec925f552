#!/usr/bin/env python3
"""
GA Optimizer CLI.

Runs the genetic algorithm optimizer on a YAML run configuration, or only
checks the configuration.

Examples:
    # Optimize the tilt angles of three solar panels for the summer solstice
    python3 ga_cli.py examples/tilt_angle_run.yaml

    # Validate a configuration and list parameter warnings
    python3 ga_cli.py examples/tilt_angle_run.yaml --check

    # Re-run with another seed into an existing output directory
    python3 ga_cli.py --config examples/tilt_angle_run.yaml --seed 7 --overwrite

Run configuration keys:
    problem:        name (e.g. solar_panel_tilt_angle) plus problem parameters
    algorithm:      population_size, maximum_generations, selection_method,
                    selection_rate, crossover_rate, mutation_rate,
                    convergence_threshold, search_method, sharing_radius,
                    discretization_steps
    initial_design: optional physical values of the current design
    random_seed:    optional seed for reproducible runs
    output:         root, overwrite, plot
"""

import argparse
import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Genetic algorithm optimizer for design variables",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'config_file',
        nargs='?',
        help='Run configuration YAML file'
    )

    parser.add_argument(
        '--config', '-c',
        dest='config_option',
        help='Run configuration YAML file (alternative to the positional argument)'
    )

    parser.add_argument(
        '--check',
        action='store_true',
        help='Validate the configuration and exit without running'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Override random_seed from the configuration'
    )

    parser.add_argument(
        '--overwrite',
        action='store_true',
        help='Allow writing into an existing output directory'
    )

    return parser


def main(argv=None) -> int:
    """Main entry point for GA CLI. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = args.config_option or args.config_file
    if config_path is None:
        parser.print_usage()
        print("Error: a run configuration file is required")
        return 1

    try:
        from ga_optimizer.cli import check_config, run_from_config
        if args.check:
            check_config(config_path)
        else:
            run_from_config(config_path, seed=args.seed, overwrite=args.overwrite or None)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except Exception as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
