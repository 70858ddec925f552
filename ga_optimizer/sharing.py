"""
Fitness sharing (niching) primitives.

Pure functions over a list of individuals. Nothing in the evolve pipeline
calls these automatically; a driver opts in by replacing raw fitness with
shared fitness before selection.
"""

from typing import List, Sequence

import numpy as np

from .data_models import Individual


def sharing_function(distance: float, sigma: float) -> float:
    """Triangular sharing: 1 - distance/sigma inside the niche radius, else 0."""
    if sigma <= 0:
        raise ValueError(f"Sharing radius must be positive, got {sigma}")
    if distance < sigma:
        return 1.0 - distance / sigma
    return 0.0


def niche_count(selected: Individual, individuals: Sequence[Individual], sigma: float) -> float:
    """
    Crowding of the region around selected.

    Sums the sharing contribution of every individual (selected itself
    included, contributing 1 when it is a member).
    """
    return sum(sharing_function(selected.distance(other), sigma) for other in individuals)


def shared_fitness(individuals: Sequence[Individual], sigma: float) -> List[float]:
    """
    Fitness discounted by niche count, one value per individual.

    Unevaluated fitness stays NaN. A niche count of zero (only possible
    for an individual outside the list) leaves the raw fitness unchanged.
    Dividing only discounts crowded individuals when fitness is
    non-negative.
    """
    shared = []
    for individual in individuals:
        count = niche_count(individual, individuals, sigma)
        if np.isnan(individual.fitness) or count <= 0:
            shared.append(individual.fitness)
        else:
            shared.append(individual.fitness / count)
    return shared


def apply_fitness_sharing(individuals: Sequence[Individual], sigma: float) -> None:
    """Replace each individual's fitness with its shared fitness in place."""
    for individual, value in zip(individuals, shared_fitness(individuals, sigma)):
        individual.fitness = value
