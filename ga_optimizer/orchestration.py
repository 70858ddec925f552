"""
Orchestration module for the optimizer.

Runs a complete optimization from a validated run configuration: build the
objective, evolve, report progress and write the outputs.
"""

from pathlib import Path
from typing import Any, Dict

import numpy as np

from .config import GeneticAlgorithmParams
from .io_utils import save_history_csv, save_population_csv, save_run_summary
from .optimizer import GeneticOptimizer, OptimizationResult
from .sample_objectives import build_objective


def run_optimization(run_config: Dict[str, Any], params: GeneticAlgorithmParams) -> OptimizationResult:
    """
    Optimize the configured problem and save the results.

    Args:
        run_config: Run configuration dict from YAML
        params: Validated algorithm parameters

    Algorithm:
        1. Build objective and design space from run_config['problem']
        2. Setup RNG (run_config['random_seed'] or a fresh seed)
        3. Encode run_config['initial_design'] (if any) as the first individual
        4. Evolve until convergence or the generation budget is used up
        5. Save history.csv, population.csv, summary.yaml (and evolution.png)
           under run_config['output']['root']
        6. Print summary report

    Returns:
        OptimizationResult of the run

    Raises:
        FileExistsError: If the output directory exists and overwrite is off
    """
    print("=" * 70)
    print("GENETIC ALGORITHM OPTIMIZATION")
    print("=" * 70)

    objective, design_space = build_objective(run_config['problem'])
    objective_type = getattr(objective, 'objective_type', None)
    unit = objective_type.unit if objective_type is not None else ""
    print(f"Problem: {run_config['problem']['name']}")
    print(f"Variables: {', '.join(design_space.names)}")

    for warning in params.check_recommended_ranges():
        print(f"Warning: {warning}")

    seed = run_config.get('random_seed')
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**31))
    print(f"Random seed: {seed}")
    rng = np.random.default_rng(seed)

    output_root = Path(run_config['output']['root'])
    overwrite = run_config['output'].get('overwrite', False)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    output_root.mkdir(parents=True, exist_ok=overwrite)
    print(f"Output directory: {output_root}\n")

    initial_genes = None
    if run_config.get('initial_design'):
        initial_genes = design_space.encode(run_config['initial_design'])

    optimizer = GeneticOptimizer(
        params,
        chromosome_length=len(design_space),
        objective=objective,
        rng=rng,
        design_space=design_space,
        initial_genes=initial_genes,
        objective_unit=unit,
        verbose=True,
    )

    print(f"Evolving {params.population_size} individuals for up to "
          f"{params.maximum_generations} generations ({params.selection_method.value} selection)...")
    print()
    result = optimizer.run()

    history_path = save_history_csv(result.history, output_root / 'history.csv', design_space, overwrite=overwrite)
    population_path = save_population_csv(
        optimizer.population.individuals, output_root / 'population.csv', overwrite=overwrite
    )
    summary = {
        'problem': run_config['problem'],
        'random_seed': seed,
        'algorithm': params.to_dict(),
        'generations': result.generations,
        'converged': result.converged,
        'best_fitness': float(result.best.fitness) if result.best is not None else None,
        'best_genes': [float(g) for g in result.best.chromosome] if result.best is not None else None,
        'best_values': {k: float(v) for k, v in result.best_values.items()},
    }
    summary_path = save_run_summary(summary, output_root / 'summary.yaml', overwrite=overwrite)

    if run_config['output'].get('plot', False):
        from .visualization_utils import plot_evolution
        plot_path = output_root / 'evolution.png'
        plot_evolution(result.history, design_space, objective_label=f"Objective ({unit})",
                       save_path=str(plot_path))
        print(f"Plot: {plot_path}")

    # Print summary
    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Generations: {result.generations}")
    print(f"Stopped because: "
          f"{'convergence threshold reached' if result.converged else 'maximum number of generations reached'}")
    if result.best is not None:
        print(f"Fittest: {optimizer.describe(result.best)}")
    print(f"History: {history_path}")
    print(f"Population: {population_path}")
    print(f"Summary: {summary_path}")

    return result
