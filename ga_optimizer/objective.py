"""
Objective function interface and gene decoding.

The optimizer only needs something that turns a decision vector into one
scalar fitness to maximize. How that number is produced (simulation,
lookup, closed form) is up to the implementation. DesignSpace maps
normalized genes to physical units and back for callers that want it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence
import math

import numpy as np

from .data_models import GENE_UPPER_BOUND, Individual


class ObjectiveFunction(ABC):
    """Single-method capability: normalized genes in, fitness out."""

    @abstractmethod
    def evaluate(self, genes: np.ndarray) -> float:
        """
        Compute the fitness of a decision vector.

        Args:
            genes: Normalized gene values in [0, 1]

        Returns:
            Scalar fitness; higher is better
        """

    def __call__(self, individual: Individual) -> float:
        return float(self.evaluate(individual.chromosome))


class FunctionObjective(ObjectiveFunction):
    """Wrap a plain callable, optionally decoding genes to physical values first."""

    def __init__(self, func: Callable, design_space: Optional["DesignSpace"] = None):
        self.func = func
        self.design_space = design_space

    def evaluate(self, genes: np.ndarray) -> float:
        if self.design_space is not None:
            return float(self.func(self.design_space.decode(genes)))
        return float(self.func(genes))


@dataclass(frozen=True)
class GeneSpec:
    """
    Physical range of one gene.

    Attributes:
        name: Label used in reports and history columns
        minimum: Physical value at gene 0
        maximum: Physical value at gene 1
        unit: Unit suffix for reports (e.g. "°", "m")
        integer: Floor the decoded value (counts such as rows per rack)
    """
    name: str
    minimum: float
    maximum: float
    unit: str = ""
    integer: bool = False

    def __post_init__(self):
        if self.maximum < self.minimum:
            raise ValueError(f"Gene '{self.name}': maximum {self.maximum} < minimum {self.minimum}")

    def decode(self, gene: float) -> float:
        value = gene * (self.maximum - self.minimum) + self.minimum
        if self.integer:
            return float(math.floor(value))
        return value

    def encode(self, value: float) -> float:
        """Normalize a physical value, clamped to the gene range [0, 1)."""
        span = self.maximum - self.minimum
        if span == 0:
            return 0.0
        return min(GENE_UPPER_BOUND, max(0.0, (value - self.minimum) / span))


class DesignSpace:
    """Ordered gene specifications for a whole chromosome."""

    def __init__(self, genes: Sequence[GeneSpec]):
        if not genes:
            raise ValueError("DesignSpace needs at least one gene")
        self.genes: List[GeneSpec] = list(genes)

    def __len__(self) -> int:
        return len(self.genes)

    @property
    def names(self) -> List[str]:
        return [g.name for g in self.genes]

    def _check_length(self, n: int) -> None:
        if n != len(self.genes):
            raise ValueError(f"Expected {len(self.genes)} genes, got {n}")

    def decode(self, genes: Sequence[float]) -> Dict[str, float]:
        self._check_length(len(genes))
        return {spec.name: spec.decode(float(g)) for spec, g in zip(self.genes, genes)}

    def encode(self, values: Dict[str, float]) -> np.ndarray:
        """Normalize physical values (keyed by gene name) into a gene vector."""
        self._check_length(len(values))
        return np.array([spec.encode(values[spec.name]) for spec in self.genes])

    def describe(self, individual: Individual, unit: str = "") -> str:
        """Format an individual as F(value1, value2, ...) = fitness unit."""
        decoded = self.decode(individual.chromosome)
        parts = []
        for spec in self.genes:
            value = decoded[spec.name]
            parts.append(f"{int(value)}{spec.unit}" if spec.integer else f"{value:.3f}{spec.unit}")
        text = f"F({', '.join(parts)}) = {individual.fitness:.5f}"
        return f"{text} {unit}" if unit else text
