"""
Population of a simple genetic algorithm (SGA).

The population owns a fixed number of individuals, a saved copy of the
last generation for constraint rollback, and per-individual violation
flags. One generation of evolution is elitist truncation followed by
blend crossover; mutation and the convergence test are separate steps so
that a driver can interleave constraint checks.
"""

from functools import cmp_to_key
from typing import List, Optional
import math

import numpy as np

from .data_models import Individual, MatingPair, SelectionMethod
from .selection import (
    DEFAULT_MAX_RETRIES,
    select_parents_by_roulette_wheel,
    select_parents_by_tournament,
)
from .crossover import blend_crossover
from .mutation import mutant_count, pick_mutant_indices, mutate_one_gene
from .sharing import niche_count

CONVERGENCE_TOLERANCE = 1e-12


class Population:
    """
    Fixed-size population of decision vectors.

    Attributes:
        individuals: Current individuals; index 0 is the best after sorting
        saved_generation: Gene snapshot taken by save_genes()
        violations: Per-slot flags set by the driver for restore_genes()
        survivors: Individuals kept by the last select_survivors() call
        mutants: Individuals changed by the last mutate() call
        selection_method: Parent selection strategy
        convergence_threshold: Relative tolerance for is_nominally_converged()
        discretization_steps: Optional number of quantization levels per gene
        rng: Random number generator shared by all operators
        max_retries: Bound on parent re-draws before giving up
    """

    def __init__(
        self,
        population_size: int,
        chromosome_length: int,
        selection_method: SelectionMethod = SelectionMethod.ROULETTE_WHEEL,
        convergence_threshold: float = 0.01,
        discretization_steps: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        max_retries: int = DEFAULT_MAX_RETRIES
    ):
        if population_size < 1:
            raise ValueError(f"Population size must be positive, got {population_size}")
        if chromosome_length < 1:
            raise ValueError(f"Chromosome length must be positive, got {chromosome_length}")
        if convergence_threshold < 0:
            raise ValueError(f"Convergence threshold must be non-negative, got {convergence_threshold}")

        self.selection_method = selection_method
        self.convergence_threshold = convergence_threshold
        self.discretization_steps = discretization_steps
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_retries = max_retries

        self.individuals: List[Individual] = [
            Individual.create(chromosome_length, self.rng, discretization_steps=discretization_steps)
            for _ in range(population_size)
        ]
        self.saved_generation: List[Individual] = [
            Individual.create(chromosome_length, self.rng, discretization_steps=discretization_steps)
            for _ in range(population_size)
        ]
        self.violations: List[bool] = [False] * population_size
        self.survivors: List[Individual] = []
        self.mutants: List[Individual] = []

    def __len__(self) -> int:
        return len(self.individuals)

    @property
    def chromosome_length(self) -> int:
        return len(self.individuals[0].chromosome)

    def sort(self) -> None:
        """Sort individuals by descending fitness; unevaluated ones go last."""
        self.individuals.sort(key=cmp_to_key(lambda a, b: a.compare(b)))

    def get_niche_count(self, selected: Individual, sigma: float) -> float:
        return niche_count(selected, self.individuals, sigma)

    def save_genes(self) -> None:
        """Snapshot every individual's genes and clear the violation flags."""
        for i, individual in enumerate(self.individuals):
            self.saved_generation[i].copy_genes(individual)
            self.violations[i] = False

    def restore_genes(self) -> None:
        """Roll back every individual flagged as violating to its snapshot."""
        for i, individual in enumerate(self.individuals):
            if self.violations[i]:
                individual.copy_genes(self.saved_generation[i])

    def get_fittest(self) -> Optional[Individual]:
        """Best evaluated individual, or None if nobody has been evaluated."""
        best = None
        highest = -math.inf
        for individual in self.individuals:
            if not individual.is_evaluated:
                continue
            if best is None or individual.fitness > highest:
                highest = individual.fitness
                best = individual
        return best

    def evolve(self, selection_rate: float, crossover_rate: float) -> None:
        """One SGA generation: elitist survivor selection, then crossover."""
        self.select_survivors(selection_rate)
        self.crossover(crossover_rate)

    def select_survivors(self, selection_rate: float) -> None:
        """
        Keep the top floor(selection_rate * population_size) individuals.

        Raises:
            ValueError: If selection_rate is outside [0, 1]
        """
        if not 0.0 <= selection_rate <= 1.0:
            raise ValueError(f"Selection rate must lie in [0, 1], got {selection_rate}")
        self.sort()
        count = math.floor(selection_rate * len(self.individuals))
        self.survivors = self.individuals[:count]

    def select_parents(self) -> MatingPair:
        """Select a mating pair from the survivors with the configured method."""
        if self.selection_method == SelectionMethod.TOURNAMENT:
            return select_parents_by_tournament(self.survivors, self.rng, self.max_retries)
        return select_parents_by_roulette_wheel(self.survivors, self.rng, self.max_retries)

    def crossover(self, crossover_rate: float) -> None:
        """
        Refill the non-survivor slots with offspring of the survivors.

        Each mating yields two children written past the survivor region;
        a child that would land beyond the last slot is discarded. Repeated
        couples are re-drawn, up to max_retries times per call, after which
        repeats are accepted (a small survivor set may not have enough
        distinct couples).
        """
        num_survivors = len(self.survivors)
        if num_survivors <= 1:
            return

        new_born = len(self.individuals) - num_survivors
        pairs: List[MatingPair] = []
        redraws = 0
        while len(pairs) * 2 < new_born:
            pair = self.select_parents()
            if pair in pairs and redraws < self.max_retries:
                redraws += 1
                continue
            pairs.append(pair)

        child_index = num_survivors
        for pair in pairs:
            child1, child2 = blend_crossover(pair, crossover_rate, self.rng, self.discretization_steps)
            if child_index < len(self.individuals):
                self.individuals[child_index] = child1
            if child_index + 1 < len(self.individuals):
                self.individuals[child_index + 1] = child2
            child_index += 2

    def mutate(self, mutation_rate: float) -> None:
        """
        Re-draw one gene in each of a few randomly picked individuals.

        The elite at index 0 and the last slot are never picked.
        """
        count = mutant_count(mutation_rate, len(self.individuals))
        if count == 0:
            return
        indices = pick_mutant_indices(len(self.individuals), count, self.rng)
        self.mutants = [self.individuals[k] for k in indices]
        for mutant in self.mutants:
            mutate_one_gene(mutant, self.rng, self.discretization_steps)

    def is_nominally_converged(self) -> bool:
        """
        Check gene-wise agreement among the top survivors.

        For every gene, each of the top half (at least 2) survivors must lie
        within convergence_threshold of the mean in relative terms.
        """
        if len(self.survivors) < 2:
            return True
        m = max(2, len(self.survivors) // 2)
        genes = np.array([s.chromosome for s in self.survivors[:m]])
        mean = genes.mean(axis=0)
        deviation = np.abs(genes - mean)
        limit = self.convergence_threshold * np.abs(mean) + CONVERGENCE_TOLERANCE
        return not bool(np.any(deviation > limit))
