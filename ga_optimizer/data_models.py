"""
Data models for the genetic algorithm optimizer.

Core data structures representing individuals (decision vectors), mating
pairs, per-generation history records, and the closed configuration enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence
import math

import numpy as np

# Largest gene value; genes live in the half-open interval [0, 1)
GENE_UPPER_BOUND = float(np.nextafter(1.0, 0.0))


class SelectionMethod(Enum):
    """Parent selection strategy used during crossover."""
    ROULETTE_WHEEL = "roulette_wheel"
    TOURNAMENT = "tournament"


class SearchMethod(Enum):
    """Search strategy exposed by calling UIs."""
    GLOBAL_SEARCH_UNIFORM_SELECTION = "global_search_uniform_selection"
    LOCAL_SEARCH_RANDOM_OPTIMIZATION = "local_search_random_optimization"
    GLOBAL_SEARCH_FITNESS_SHARING = "global_search_fitness_sharing"


class ObjectiveFunctionType(Enum):
    """Aggregate that an objective reports (single day vs. full year)."""
    DAILY_TOTAL_OUTPUT = "daily_total_output"
    YEARLY_TOTAL_OUTPUT = "yearly_total_output"
    DAILY_AVERAGE_OUTPUT = "daily_average_output"
    YEARLY_AVERAGE_OUTPUT = "yearly_average_output"
    DAILY_PROFIT = "daily_profit"
    YEARLY_PROFIT = "yearly_profit"

    @property
    def unit(self) -> str:
        if self in (ObjectiveFunctionType.DAILY_PROFIT, ObjectiveFunctionType.YEARLY_PROFIT):
            return "dollars"
        return "kWh"

    @property
    def is_yearly(self) -> bool:
        return self.value.startswith("yearly")


def sample_gene(rng: np.random.Generator, discretization_steps: Optional[int] = None) -> float:
    """
    Draw a fresh gene value.

    Uniform in [0, 1), or one of the levels k / steps (k = 0 .. steps-1)
    when discretization is enabled.
    """
    if discretization_steps:
        return int(rng.integers(0, discretization_steps)) / discretization_steps
    return float(rng.random())


def snap_to_level(value: float, discretization_steps: int) -> float:
    """Snap a gene value to the nearest discretization level."""
    level = min(int(round(value * discretization_steps)), discretization_steps - 1)
    return level / discretization_steps


@dataclass(eq=False)
class Individual:
    """
    A decision vector: fixed-length normalized genes plus a scalar fitness.

    Equality is identity; two individuals with the same genes are still
    different members of a population.

    Attributes:
        chromosome: Gene values in [0, 1)
        fitness: Fitness score (NaN until evaluated); higher is better
        discretization_steps: Optional number of quantization levels per gene
    """
    chromosome: np.ndarray
    fitness: float = math.nan
    discretization_steps: Optional[int] = None

    def __post_init__(self):
        """Own a private float copy of the genes and validate them."""
        self.chromosome = np.array(self.chromosome, dtype=float)
        if self.chromosome.ndim != 1 or self.chromosome.size == 0:
            raise ValueError("Chromosome must be a non-empty 1-D sequence of genes")
        if self.discretization_steps is not None and self.discretization_steps < 1:
            raise ValueError(f"discretization_steps must be positive, got {self.discretization_steps}")
        for i, value in enumerate(self.chromosome):
            self.set_gene(i, value)

    @classmethod
    def create(
        cls,
        chromosome_length: int,
        rng: Optional[np.random.Generator] = None,
        randomize: bool = True,
        discretization_steps: Optional[int] = None
    ) -> "Individual":
        """
        Create an individual with random (or zeroed) genes.

        Args:
            chromosome_length: Number of genes
            rng: Random number generator (required when randomize is True)
            randomize: Draw every gene uniformly (or from the discretized levels)
            discretization_steps: Optional number of quantization levels

        Returns:
            New unevaluated Individual
        """
        if chromosome_length < 1:
            raise ValueError(f"Chromosome length must be positive, got {chromosome_length}")
        if randomize:
            if rng is None:
                rng = np.random.default_rng()
            genes = [sample_gene(rng, discretization_steps) for _ in range(chromosome_length)]
        else:
            genes = np.zeros(chromosome_length)
        return cls(chromosome=genes, discretization_steps=discretization_steps)

    def __len__(self) -> int:
        return len(self.chromosome)

    @property
    def is_evaluated(self) -> bool:
        return not math.isnan(self.fitness)

    def _check_index(self, i: int) -> None:
        if not 0 <= i < len(self.chromosome):
            raise IndexError(f"Gene index {i} out of range for chromosome of length {len(self.chromosome)}")

    def get_gene(self, i: int) -> float:
        self._check_index(i)
        return float(self.chromosome[i])

    def set_gene(self, i: int, value: float) -> None:
        """Set gene i, snapping to the nearest level when discretized."""
        self._check_index(i)
        value = float(value)
        if not math.isfinite(value) or value < 0.0 or value >= 1.0:
            raise ValueError(f"Gene value must lie in [0, 1), got {value}")
        if self.discretization_steps:
            value = snap_to_level(value, self.discretization_steps)
        self.chromosome[i] = value

    def _check_length(self, other: "Individual") -> None:
        if len(other.chromosome) != len(self.chromosome):
            raise ValueError(
                f"Chromosome length mismatch: {len(self.chromosome)} vs {len(other.chromosome)}"
            )

    def compare(self, other: "Individual") -> int:
        """
        Compare fitness for a descending sort.

        Returns a negative number when self is fitter than other, positive
        when other is fitter, zero on a tie. Unevaluated fitness ranks last.
        """
        mine = _rank_value(self.fitness)
        theirs = _rank_value(other.fitness)
        if mine > theirs:
            return -1
        if mine < theirs:
            return 1
        return 0

    def distance(self, other: "Individual") -> float:
        """Euclidean distance between the gene vectors."""
        self._check_length(other)
        return float(np.linalg.norm(self.chromosome - other.chromosome))

    def copy_genes(self, other: "Individual") -> None:
        """Overwrite this individual's genes and fitness with other's."""
        self._check_length(other)
        self.chromosome[:] = other.chromosome
        self.fitness = other.fitness

    def copy(self) -> "Individual":
        """Create a deep copy of this individual."""
        return Individual(
            chromosome=self.chromosome.copy(),
            fitness=self.fitness,
            discretization_steps=self.discretization_steps
        )


def _rank_value(fitness: float) -> float:
    return -math.inf if math.isnan(fitness) else fitness


@dataclass(frozen=True, eq=False)
class MatingPair:
    """
    Two individuals selected to produce offspring together.

    Pairs compare equal when they hold the same two individuals (by
    identity), in either order.
    """
    dad: Individual
    mom: Individual

    def __post_init__(self):
        """Reject pairing an individual with itself."""
        if self.dad is self.mom:
            raise ValueError("A mating pair needs two distinct individuals")

    def _key(self) -> frozenset:
        return frozenset((id(self.dad), id(self.mom)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatingPair):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass
class GenerationRecord:
    """
    Snapshot of one generation of an optimization run.

    Attributes:
        generation: Generation index (0 is the baseline before evolution)
        fittest: Copy of the best individual of this generation
        population_genes: Gene matrix (population_size x chromosome_length),
            empty for the baseline record
        converged: Convergence flag observed after this generation
    """
    generation: int
    fittest: Individual
    population_genes: np.ndarray = field(default_factory=lambda: np.empty((0, 0)))
    converged: bool = False

    @classmethod
    def from_population(
        cls,
        generation: int,
        fittest: Individual,
        individuals: Sequence[Individual],
        converged: bool = False
    ) -> "GenerationRecord":
        genes = np.array([ind.chromosome for ind in individuals], dtype=float)
        return cls(generation=generation, fittest=fittest.copy(), population_genes=genes, converged=converged)
