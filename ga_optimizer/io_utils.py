"""
I/O utilities for the optimizer.

Handles CSV export of the evolution history, CSV save/load of population
snapshots, and YAML run summaries.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import yaml

from .data_models import GenerationRecord, Individual
from .objective import DesignSpace


def _prepare_output(output_path: Union[str, Path], overwrite: bool) -> Path:
    output_path = Path(output_path)
    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def history_rows(
    history: Sequence[GenerationRecord],
    design_space: Optional[DesignSpace] = None
) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    Flatten the evolution history into table rows.

    Columns: Step, one column per gene of the generation's best (decoded
    when a design space is given, otherwise Var1..VarN), Objective, then
    Individual1..IndividualK holding every gene of every individual of
    that generation, also decoded when possible.

    Returns:
        Tuple of (fieldnames, rows)
    """
    if not history:
        return ['Step', 'Objective'], []

    n = len(history[0].fittest.chromosome)
    if design_space is not None:
        gene_names = design_space.names
    else:
        gene_names = [f"Var{k + 1}" for k in range(n)]
    widest = max(record.population_genes.size for record in history)
    individual_names = [f"Individual{k + 1}" for k in range(widest)]

    rows = []
    for record in history:
        row: Dict[str, Any] = {'Step': record.generation}
        genes = record.fittest.chromosome
        if design_space is not None:
            row.update(design_space.decode(genes))
        else:
            row.update({name: float(g) for name, g in zip(gene_names, genes)})
        row['Objective'] = record.fittest.fitness

        for k, gene in enumerate(record.population_genes.ravel()):
            if design_space is not None:
                gene = design_space.genes[k % n].decode(gene)
            row[individual_names[k]] = float(gene)
        rows.append(row)

    return ['Step'] + gene_names + ['Objective'] + individual_names, rows


def save_history_csv(
    history: Sequence[GenerationRecord],
    output_path: Union[str, Path],
    design_space: Optional[DesignSpace] = None,
    overwrite: bool = False
) -> Path:
    """
    Save the evolution history to a CSV file.

    Args:
        history: Generation records (baseline first)
        output_path: Path for output CSV
        design_space: Optional decoder for physical gene values
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)
    fieldnames, rows = history_rows(history, design_space)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, restval='')
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return output_path


def save_population_csv(
    individuals: Sequence[Individual],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save genes and fitness of a population to CSV.

    CSV format:
        fitness,gene_1,gene_2,...
        1234.5,0.51,0.49
        nan,0.12,0.98

    Raises:
        FileExistsError: If file exists and overwrite=False
        ValueError: If the population is empty
    """
    if not individuals:
        raise ValueError("Cannot save an empty population")
    output_path = _prepare_output(output_path, overwrite)
    n = len(individuals[0].chromosome)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['fitness'] + [f"gene_{k + 1}" for k in range(n)])
        for individual in individuals:
            writer.writerow([repr(float(individual.fitness))] + [repr(float(g)) for g in individual.chromosome])

    return output_path


def load_population_csv(
    csv_path: Union[str, Path],
    discretization_steps: Optional[int] = None
) -> List[Individual]:
    """
    Load individuals written by save_population_csv.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    individuals = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if not header or header[0] != 'fitness' or len(header) < 2:
            raise ValueError(f"Invalid CSV format in {csv_path}. Expected columns: fitness,gene_1,...")

        for line_number, row in enumerate(reader, start=2):
            if len(row) != len(header):
                raise ValueError(f"{csv_path}:{line_number}: expected {len(header)} values, got {len(row)}")
            individuals.append(Individual(
                chromosome=np.array([float(v) for v in row[1:]]),
                fitness=float(row[0]),
                discretization_steps=discretization_steps,
            ))

    return individuals


def save_run_summary(
    summary: Dict[str, Any],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a run summary as YAML, stamped with the save time.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)
    data = dict(summary)
    data['saved_at'] = datetime.now().isoformat()

    with open(output_path, 'w') as f:
        yaml.safe_dump(data, f, sort_keys=False)

    return output_path
