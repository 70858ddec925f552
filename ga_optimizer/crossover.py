"""
Crossover operators.

Implements blend (arithmetic) crossover: every mating draws one blend
factor beta and produces two children whose genes are convex combinations
of the parents' genes.
"""

from typing import Optional, Tuple

import numpy as np

from .data_models import Individual, MatingPair


def blend_crossover(
    pair: MatingPair,
    crossover_rate: float,
    rng: np.random.Generator,
    discretization_steps: Optional[int] = None
) -> Tuple[Individual, Individual]:
    """
    Mate dad and mom into two children.

    A single beta in [0, 1) is shared by all genes of the mating. For each
    gene a coin is flipped against crossover_rate:

        triggered:     child1 = beta*dad + (1-beta)*mom, child2 = beta*mom + (1-beta)*dad
        not triggered: the two blends are swapped between the children

    With crossover_rate 1 and beta at 0 or 1 this is uniform crossover; with
    crossover_rate 0 it reduces to plain blending.

    Args:
        pair: Parents to mate
        crossover_rate: Per-gene probability of the unswapped assignment
        rng: Random number generator
        discretization_steps: Quantization levels for the children's genes

    Returns:
        Tuple of (child1, child2), both unevaluated

    Raises:
        ValueError: If the parents' chromosome lengths differ
    """
    dad, mom = pair.dad.chromosome, pair.mom.chromosome
    if len(dad) != len(mom):
        raise ValueError(f"Chromosome length mismatch: {len(dad)} vs {len(mom)}")

    beta = rng.random()
    dad_weighted = beta * dad + (1.0 - beta) * mom
    mom_weighted = beta * mom + (1.0 - beta) * dad

    triggered = rng.random(len(dad)) < crossover_rate
    genes1 = np.where(triggered, dad_weighted, mom_weighted)
    genes2 = np.where(triggered, mom_weighted, dad_weighted)

    # Rounding can push a blend a hair outside the parents' range
    low = np.minimum(dad, mom)
    high = np.maximum(dad, mom)
    genes1 = np.clip(genes1, low, high)
    genes2 = np.clip(genes2, low, high)

    child1 = Individual(chromosome=genes1, discretization_steps=discretization_steps)
    child2 = Individual(chromosome=genes2, discretization_steps=discretization_steps)
    return child1, child2
