"""
Genetic Algorithm Optimizer for Design Parameters

This package provides a simple genetic algorithm (SGA) that evolves a
population of normalized design variables (e.g. solar panel tilt angles)
against a caller-supplied objective function.

Key Features:
- External fitness evaluation (objective interface or precomputed values)
- Elitist truncation, blend crossover, single-gene mutation
- Roulette wheel and tournament parent selection
- Nominal convergence test and optional fitness sharing
- Injected random number generator for reproducible runs

Modules:
- data_models: Core data structures (Individual, MatingPair, GenerationRecord, enums)
- selection: Roulette wheel and tournament parent selection
- crossover: Blend crossover
- mutation: Mutant selection and single-gene mutation
- sharing: Niche count and fitness sharing
- population: Population of individuals and the evolution steps
- objective: Objective function interface and gene decoding
- sample_objectives: Closed-form example objectives
- optimizer: Evolution driver
- config: Run configuration loading and validation
- io_utils: CSV/YAML output
- visualization_utils: Evolution plots
- orchestration: End-to-end runs
- cli: Command-line interface
"""

__version__ = "0.1.0"
__author__ = "Design Optimization Team"

from .data_models import (
    Individual,
    MatingPair,
    GenerationRecord,
    SelectionMethod,
    SearchMethod,
    ObjectiveFunctionType,
)
from .population import Population
from .selection import SelectionError
from .objective import ObjectiveFunction, FunctionObjective, GeneSpec, DesignSpace
from .config import GeneticAlgorithmParams, ConfigValidationError
from .optimizer import GeneticOptimizer, OptimizationResult

__all__ = [
    "Individual",
    "MatingPair",
    "GenerationRecord",
    "SelectionMethod",
    "SearchMethod",
    "ObjectiveFunctionType",
    "Population",
    "SelectionError",
    "ObjectiveFunction",
    "FunctionObjective",
    "GeneSpec",
    "DesignSpace",
    "GeneticAlgorithmParams",
    "ConfigValidationError",
    "GeneticOptimizer",
    "OptimizationResult",
]
