"""
CLI module for the optimizer.

Handles run configuration loading, validation, and dispatching the run.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import GeneticAlgorithmParams, load_run_config, validate_run_config
from .optimizer import OptimizationResult


def check_config(config_path: Union[str, Path]) -> Tuple[GeneticAlgorithmParams, List[str]]:
    """
    Load and validate a run configuration without running it.

    The problem definition is built as well, so unknown problems and
    problem parameters are caught here too.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Tuple of (validated parameters, recommended-range warnings)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    print(f"Checking configuration: {config_path}")
    config = load_run_config(config_path)
    params = validate_run_config(config)

    from .sample_objectives import build_objective
    _, design_space = build_objective(config['problem'])

    print(f"Problem: {config['problem']['name']} ({', '.join(design_space.names)})")
    for key, value in params.to_dict().items():
        print(f"  {key}: {value}")

    warnings = params.check_recommended_ranges()
    for warning in warnings:
        print(f"Warning: {warning}")
    print("Configuration is valid")
    return params, warnings


def run_from_config(
    config_path: Union[str, Path],
    seed: Optional[int] = None,
    overwrite: Optional[bool] = None
) -> OptimizationResult:
    """
    Load run configuration and execute the optimization.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file
        seed: Overrides random_seed from the file when given
        overwrite: Overrides output.overwrite from the file when given

    Returns:
        OptimizationResult of the run

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Various exceptions from the run itself
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)
    if seed is not None:
        config['random_seed'] = seed
    if overwrite is not None and isinstance(config.get('output'), dict):
        config['output']['overwrite'] = overwrite

    print("Validating configuration...")
    params = validate_run_config(config)
    print(f"Problem: {config['problem']['name']}\n")

    from .orchestration import run_optimization
    result = run_optimization(config, params)

    print("\nRun completed successfully!")
    return result
