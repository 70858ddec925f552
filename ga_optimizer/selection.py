"""
Parent selection operators.

Implements fitness-proportionate (roulette wheel) and tournament selection
over the survivors of a generation. Survivors are expected in descending
fitness order, as produced by Population.select_survivors.
"""

from typing import List
import math

import numpy as np

from .data_models import Individual, MatingPair

DEFAULT_MAX_RETRIES = 1000


class SelectionError(ValueError):
    """Raised when no valid mating pair can be selected."""
    pass


def _fitness_or_floor(individual: Individual) -> float:
    return -math.inf if math.isnan(individual.fitness) else individual.fitness


def roulette_wheel_weights(survivors: List[Individual]) -> np.ndarray:
    """
    Compute non-negative wheel weights for the survivors.

    Fitness is shifted by the lowest evaluated survivor fitness so every
    weight is non-negative; unevaluated survivors get zero weight. When no
    survivor carries weight (all fitness equal, or nothing evaluated) every
    survivor gets the same weight, which is still fitness-proportionate.

    Args:
        survivors: Survivors in descending fitness order

    Returns:
        Array of weights, one per survivor
    """
    fitness = np.array([s.fitness for s in survivors], dtype=float)
    evaluated = ~np.isnan(fitness)
    weights = np.zeros(len(survivors))
    if evaluated.any():
        lowest = fitness[evaluated].min()
        weights[evaluated] = fitness[evaluated] - lowest
    if not np.any(weights > 0):
        weights = np.ones(len(survivors))
    return weights


def spin_wheel(weights: np.ndarray, rng: np.random.Generator) -> int:
    """Spin the wheel once and return the index of the selected slot."""
    cumulative = np.cumsum(weights)
    position = rng.random() * cumulative[-1]
    index = int(np.searchsorted(cumulative, position, side='right'))
    return min(index, len(weights) - 1)


def select_parents_by_roulette_wheel(
    survivors: List[Individual],
    rng: np.random.Generator,
    max_retries: int = DEFAULT_MAX_RETRIES
) -> MatingPair:
    """
    Select a mating pair by fitness-proportionate selection.

    The wheel is spun once for dad, then re-spun independently for mom
    until a survivor different from dad comes up. When dad is the only
    survivor with weight, the wheel can never yield anyone else, so mom is
    drawn uniformly from the other survivors.

    Args:
        survivors: Survivors in descending fitness order
        rng: Random number generator
        max_retries: Maximum number of re-spins for mom

    Returns:
        MatingPair of two distinct survivors

    Raises:
        SelectionError: If fewer than 2 survivors exist or no distinct mom
            is found within max_retries spins
    """
    if len(survivors) < 2:
        raise SelectionError(f"Need at least 2 survivors for roulette wheel selection, got {len(survivors)}")

    weights = roulette_wheel_weights(survivors)
    d = spin_wheel(weights, rng)
    dad = survivors[d]

    if np.count_nonzero(weights > 0) < 2:
        others = [k for k in range(len(survivors)) if k != d]
        return MatingPair(dad, survivors[others[int(rng.integers(len(others)))]])

    for _ in range(max_retries):
        mom = survivors[spin_wheel(weights, rng)]
        if mom is not dad:
            return MatingPair(dad, mom)

    raise SelectionError(
        f"Roulette wheel failed to find a distinct mom after {max_retries} spins"
    )


def _run_tournament(survivors: List[Individual], pool_size: int, rng: np.random.Generator) -> int:
    i, j = rng.choice(pool_size, size=2, replace=False)
    if _fitness_or_floor(survivors[i]) > _fitness_or_floor(survivors[j]):
        return int(i)
    return int(j)


def select_parents_by_tournament(
    survivors: List[Individual],
    rng: np.random.Generator,
    max_retries: int = DEFAULT_MAX_RETRIES
) -> MatingPair:
    """
    Select a mating pair by binary tournament.

    Each parent is the fitter of two distinct survivors drawn at random
    from the survivor range excluding the lowest-ranked survivor. The mom
    tournament is repeated until its winner differs from dad.

    With two survivors they are the only possible couple. With three, the
    lowest survivor stays in the pool because a pool of two always yields
    the same winner.

    Args:
        survivors: Survivors in descending fitness order
        rng: Random number generator
        max_retries: Maximum number of repeated mom tournaments

    Returns:
        MatingPair of two distinct survivors

    Raises:
        SelectionError: If fewer than 2 survivors exist or no distinct mom
            wins within max_retries tournaments
    """
    num_survivors = len(survivors)
    if num_survivors < 2:
        raise SelectionError("Must have at least two survivors to be used as parents")

    if num_survivors == 2:
        return MatingPair(survivors[0], survivors[1])

    pool_size = num_survivors - 1 if num_survivors > 3 else num_survivors

    d = _run_tournament(survivors, pool_size, rng)
    for _ in range(max_retries):
        m = _run_tournament(survivors, pool_size, rng)
        if m != d:
            return MatingPair(survivors[d], survivors[m])

    raise SelectionError(
        f"Tournament failed to find a distinct mom after {max_retries} rounds"
    )
