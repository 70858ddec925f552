"""
Mutation operators.

Mutation picks a number of distinct individuals (never the elite at index
0) and re-draws exactly one gene of each.
"""

from typing import Optional
import math

import numpy as np

from .data_models import Individual, sample_gene

ZERO_TOLERANCE = 1e-10


def mutant_count(mutation_rate: float, population_size: int) -> int:
    """
    Number of individuals to mutate for a given rate.

    floor(mutation_rate * (population_size - 1)), at least 1 for any
    positive rate, and never more than the population_size - 2 candidate
    slots (index 0 and the last index are excluded).

    Args:
        mutation_rate: Mutation rate in [0, 1]
        population_size: Number of individuals in the population

    Returns:
        Number of mutants (0 when the rate is zero or no slot is eligible)
    """
    if abs(mutation_rate) < ZERO_TOLERANCE:
        return 0
    candidates = population_size - 2
    if candidates < 1:
        return 0
    m = max(1, math.floor(mutation_rate * (population_size - 1)))
    return min(m, candidates)


def pick_mutant_indices(population_size: int, count: int, rng: np.random.Generator) -> np.ndarray:
    """Pick count distinct indices from [1, population_size - 2]."""
    if count <= 0:
        return np.empty(0, dtype=int)
    return rng.choice(np.arange(1, population_size - 1), size=count, replace=False)


def mutate_one_gene(
    individual: Individual,
    rng: np.random.Generator,
    discretization_steps: Optional[int] = None
) -> int:
    """
    Overwrite one randomly chosen gene with a different random value.

    When discretized, the new value is drawn from the other levels. The
    individual's fitness is reset because its genes changed.

    Returns:
        Index of the mutated gene
    """
    gene_index = int(rng.integers(0, len(individual.chromosome)))
    current = individual.get_gene(gene_index)
    if discretization_steps:
        if discretization_steps < 2:
            raise ValueError("Mutation needs at least 2 discretization levels")
        level = int(round(current * discretization_steps))
        shift = int(rng.integers(1, discretization_steps))
        value = ((level + shift) % discretization_steps) / discretization_steps
    else:
        value = sample_gene(rng)
        while value == current:
            value = sample_gene(rng)
    individual.set_gene(gene_index, value)
    individual.fitness = math.nan
    return gene_index
