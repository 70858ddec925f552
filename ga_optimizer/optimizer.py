"""
Evolution driver.

GeneticOptimizer runs the per-generation loop around a Population:
evaluate every individual, remember the best, save genes, evolve, roll
back individuals that violate the caller's constraint, then either stop
on convergence or mutate and go again.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
import numpy as np

from .config import GeneticAlgorithmParams
from .data_models import GenerationRecord, Individual, SearchMethod
from .objective import DesignSpace, ObjectiveFunction
from .population import Population
from .sharing import apply_fitness_sharing


@dataclass
class OptimizationResult:
    """
    Outcome of an optimization run.

    Attributes:
        best: Copy of the fittest individual found (None if nothing was evaluated)
        best_values: Best genes decoded into physical units (empty without a design space)
        generations: Number of generations evaluated
        converged: True if the run stopped on nominal convergence
        history: Baseline record followed by one record per generation
    """
    best: Optional[Individual]
    best_values: Dict[str, float] = field(default_factory=dict)
    generations: int = 0
    converged: bool = False
    history: List[GenerationRecord] = field(default_factory=list)


class GeneticOptimizer:
    """
    Drive a Population through evaluation, evolution and mutation.

    Fitness comes either from an ObjectiveFunction or from values the
    caller passes to step(), so expensive evaluations can run elsewhere
    (in parallel, in a simulator) between generations.
    """

    def __init__(
        self,
        params: GeneticAlgorithmParams,
        chromosome_length: int,
        objective: Optional[ObjectiveFunction] = None,
        rng: Optional[np.random.Generator] = None,
        constraint: Optional[Callable[[Individual], bool]] = None,
        design_space: Optional[DesignSpace] = None,
        initial_genes: Optional[Sequence[float]] = None,
        objective_unit: str = "",
        verbose: bool = False
    ):
        """
        Args:
            params: Algorithm parameters (validated here)
            chromosome_length: Number of genes per individual
            objective: Fitness function; required unless fitness is passed to step()
            rng: Random number generator shared with the population
            constraint: Predicate returning True for feasible individuals
            design_space: Gene decoder used for reports and results
            initial_genes: Genes of the first individual (e.g. the current design)
            objective_unit: Unit label for progress lines
            verbose: Print one progress line per generation

        Raises:
            ConfigValidationError: If params are invalid
            ValueError: If design_space or initial_genes disagree with chromosome_length
        """
        params.raise_if_invalid()
        if design_space is not None and len(design_space) != chromosome_length:
            raise ValueError(
                f"Design space has {len(design_space)} genes, chromosome length is {chromosome_length}"
            )

        self.params = params
        self.objective = objective
        self.constraint = constraint
        self.design_space = design_space
        self.objective_unit = objective_unit
        self.verbose = verbose
        self.rng = rng if rng is not None else np.random.default_rng()

        self.population = Population(
            population_size=params.population_size,
            chromosome_length=chromosome_length,
            selection_method=params.selection_method,
            convergence_threshold=params.convergence_threshold,
            discretization_steps=params.discretization_steps,
            rng=self.rng,
        )

        if initial_genes is not None:
            firstborn = self.population.individuals[0]
            if len(initial_genes) != chromosome_length:
                raise ValueError(f"Expected {chromosome_length} initial genes, got {len(initial_genes)}")
            for i, gene in enumerate(initial_genes):
                firstborn.set_gene(i, gene)

        self.generation = 0
        self.converged = False
        self.history: List[GenerationRecord] = []

    @property
    def finished(self) -> bool:
        return self.converged or self.generation >= self.params.maximum_generations

    def describe(self, individual: Individual) -> str:
        if self.design_space is not None:
            return self.design_space.describe(individual, self.objective_unit)
        genes = ", ".join(f"{g:.4f}" for g in individual.chromosome)
        return f"F({genes}) = {individual.fitness:.5f} {self.objective_unit}".rstrip()

    def evaluate(self, fitness_values: Optional[Sequence[float]] = None) -> None:
        """
        Assign fitness to every individual.

        Raises:
            ValueError: If fitness_values has the wrong length, or neither
                fitness_values nor an objective is available
        """
        individuals = self.population.individuals
        if fitness_values is not None:
            if len(fitness_values) != len(individuals):
                raise ValueError(f"Expected {len(individuals)} fitness values, got {len(fitness_values)}")
            for individual, value in zip(individuals, fitness_values):
                individual.fitness = float(value)
            return
        if self.objective is None:
            raise ValueError("No objective function: pass fitness values to step()")
        for individual in individuals:
            individual.fitness = self.objective(individual)

    def detect_violations(self) -> bool:
        """Flag individuals that fail the constraint; True if any did."""
        if self.constraint is None:
            return False
        population = self.population
        for i, individual in enumerate(population.individuals):
            population.violations[i] = not self.constraint(individual)
        return any(population.violations)

    def step(self, fitness_values: Optional[Sequence[float]] = None) -> bool:
        """
        Evaluate and evolve one generation.

        The fittest individual is copied before evolution. With fitness
        sharing, survivors are ranked by shared fitness, so the raw best is
        not protected by elitism; only the recorded copy is kept.

        Args:
            fitness_values: Optional externally computed fitness, one per individual

        Returns:
            True if the population has nominally converged
        """
        if self.finished:
            return self.converged

        population = self.population
        self.evaluate(fitness_values)

        # The first individual of the first generation is the baseline
        if not self.history:
            self.history.append(GenerationRecord(generation=0, fittest=population.individuals[0].copy()))

        snapshot = [ind.copy() for ind in population.individuals]
        fittest = population.get_fittest()
        if fittest is not None:
            fittest = fittest.copy()

        population.save_genes()
        if self.params.search_method == SearchMethod.GLOBAL_SEARCH_FITNESS_SHARING:
            apply_fitness_sharing(population.individuals, self.params.sharing_radius)
        population.evolve(self.params.selection_rate, self.params.crossover_rate)

        if self.detect_violations():
            population.restore_genes()
        else:
            self.converged = population.is_nominally_converged()
            if not self.converged:
                population.mutate(self.params.mutation_rate)

        self.generation += 1
        if fittest is not None:
            self.history.append(
                GenerationRecord.from_population(self.generation, fittest, snapshot, self.converged)
            )
            if self.verbose:
                print(f"Generation {self.generation}: {self.describe(fittest)}")
        elif self.verbose:
            print(f"Generation {self.generation}: no evaluated individuals")

        return self.converged

    def best(self) -> Optional[Individual]:
        """Best individual recorded over all generations."""
        best = None
        for record in self.history[1:]:
            if best is None or record.fittest.fitness > best.fitness:
                best = record.fittest
        return best

    def result(self) -> OptimizationResult:
        best = self.best()
        best_values = {}
        if best is not None and self.design_space is not None:
            best_values = self.design_space.decode(best.chromosome)
        return OptimizationResult(
            best=best.copy() if best is not None else None,
            best_values=best_values,
            generations=self.generation,
            converged=self.converged,
            history=list(self.history),
        )

    def run(self) -> OptimizationResult:
        """Step until convergence or the generation budget is used up."""
        while not self.finished:
            self.step()
        return self.result()
