"""
Configuration for the genetic algorithm optimizer.

Loads YAML run configurations and turns the 'algorithm' section into a
validated GeneticAlgorithmParams object.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union
from enum import Enum
import yaml

from .data_models import SelectionMethod, SearchMethod


class ConfigValidationError(Exception):
    """Raised when a run configuration is invalid."""
    pass


# Ranges offered by the interactive design tools; values outside them are
# allowed but reported as warnings.
RECOMMENDED_POPULATION_SIZE = (10, 100)
RECOMMENDED_MAXIMUM_GENERATIONS = (5, 100)
RECOMMENDED_CONVERGENCE_THRESHOLD = (0.0, 0.1)


def parse_enum(enum_class: Type[Enum], value: Any) -> Enum:
    """
    Parse an enum member from a member, a name or a value (case-insensitive).

    Raises:
        ConfigValidationError: If the value matches no member
    """
    if isinstance(value, enum_class):
        return value
    text = str(value).strip()
    for member in enum_class:
        if text.upper() == member.name or text.lower() == str(member.value).lower():
            return member
    choices = ", ".join(m.value for m in enum_class)
    raise ConfigValidationError(f"Invalid {enum_class.__name__}: '{value}'. Must be one of: {choices}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class GeneticAlgorithmParams:
    """
    Tunable parameters of a genetic algorithm run.

    Attributes:
        population_size: Number of individuals
        maximum_generations: Generation budget
        selection_method: Parent selection strategy
        selection_rate: Fraction of the population kept as survivors
        crossover_rate: Per-gene probability of the unswapped blend
        mutation_rate: Fraction of the population mutated each generation
        convergence_threshold: Relative tolerance for nominal convergence
        search_method: Global uniform search or global search with fitness sharing
        local_search_radius: Reserved for local search; not used by the engine
        sharing_radius: Niche radius (sigma) for fitness sharing
        discretization_steps: Optional number of levels per gene
    """
    population_size: int = 20
    maximum_generations: int = 5
    selection_method: SelectionMethod = SelectionMethod.ROULETTE_WHEEL
    selection_rate: float = 0.5
    crossover_rate: float = 0.5
    mutation_rate: float = 0.1
    convergence_threshold: float = 0.01
    search_method: SearchMethod = SearchMethod.GLOBAL_SEARCH_UNIFORM_SELECTION
    local_search_radius: float = 0.1
    sharing_radius: float = 0.1
    discretization_steps: Optional[int] = None

    def __post_init__(self):
        """Accept enum names/values from YAML."""
        self.selection_method = parse_enum(SelectionMethod, self.selection_method)
        self.search_method = parse_enum(SearchMethod, self.search_method)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeneticAlgorithmParams":
        """
        Build parameters from a config dict, using defaults for missing keys.

        Raises:
            ConfigValidationError: If the dict has unknown keys or bad enum values
        """
        data = data or {}
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown algorithm parameter(s): {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with enum values, suitable for YAML output."""
        data = asdict(self)
        data['selection_method'] = self.selection_method.value
        data['search_method'] = self.search_method.value
        return data

    def validate(self) -> List[str]:
        """
        Check hard constraints.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not isinstance(self.population_size, int) or self.population_size < 2:
            errors.append(f"population_size must be an integer >= 2, got {self.population_size}")
        if not isinstance(self.maximum_generations, int) or self.maximum_generations < 1:
            errors.append(f"maximum_generations must be a positive integer, got {self.maximum_generations}")

        non_numeric = [
            name for name in ('selection_rate', 'crossover_rate', 'mutation_rate',
                              'convergence_threshold', 'local_search_radius', 'sharing_radius')
            if not _is_number(getattr(self, name))
        ]
        for name in non_numeric:
            errors.append(f"{name} must be a number, got {getattr(self, name)!r}")

        for name in ('selection_rate', 'crossover_rate', 'mutation_rate'):
            value = getattr(self, name)
            if name not in non_numeric and not 0.0 <= value <= 1.0:
                errors.append(f"{name} must lie in [0, 1], got {value}")

        if 'convergence_threshold' not in non_numeric and self.convergence_threshold < 0:
            errors.append(f"convergence_threshold must be non-negative, got {self.convergence_threshold}")
        if 'sharing_radius' not in non_numeric and self.sharing_radius <= 0:
            errors.append(f"sharing_radius must be positive, got {self.sharing_radius}")
        if self.discretization_steps is not None:
            if not isinstance(self.discretization_steps, int) or self.discretization_steps < 2:
                errors.append(f"discretization_steps must be an integer >= 2, got {self.discretization_steps}")

        if self.search_method == SearchMethod.LOCAL_SEARCH_RANDOM_OPTIMIZATION:
            errors.append("search_method 'local_search_random_optimization' is not supported")

        return errors

    def check_recommended_ranges(self) -> List[str]:
        """
        Compare against the ranges offered by the design tools.

        Returns:
            List of warning messages (empty if all values are in range)
        """
        warnings = []
        low, high = RECOMMENDED_POPULATION_SIZE
        if not low <= self.population_size <= high:
            warnings.append(f"population_size {self.population_size} is outside the usual range [{low}, {high}]")
        low, high = RECOMMENDED_MAXIMUM_GENERATIONS
        if not low <= self.maximum_generations <= high:
            warnings.append(f"maximum_generations {self.maximum_generations} is outside the usual range [{low}, {high}]")
        low, high = RECOMMENDED_CONVERGENCE_THRESHOLD
        if not low <= self.convergence_threshold <= high:
            warnings.append(f"convergence_threshold {self.convergence_threshold} is outside the usual range [{low}, {high}]")
        if int(self.selection_rate * self.population_size) < 2:
            warnings.append("selection_rate keeps fewer than 2 survivors; crossover will not run")
        return warnings

    def raise_if_invalid(self) -> None:
        errors = self.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))


def load_run_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If the file is not valid YAML or is empty
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def validate_run_config(config: Dict[str, Any]) -> GeneticAlgorithmParams:
    """
    Validate run configuration structure and algorithm parameters.

    Args:
        config: Run configuration dictionary

    Returns:
        Validated GeneticAlgorithmParams

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Run configuration must be a mapping")

    for field_name in ('problem', 'output'):
        if field_name not in config:
            raise ConfigValidationError(f"Missing required field: '{field_name}'")

    if not isinstance(config['problem'], dict):
        raise ConfigValidationError("'problem' must be a dictionary")
    if 'name' not in config['problem']:
        raise ConfigValidationError("Missing required field: 'problem.name'")

    if not isinstance(config['output'], dict):
        raise ConfigValidationError("'output' must be a dictionary")
    if 'root' not in config['output']:
        raise ConfigValidationError("Missing required field: 'output.root'")

    algorithm = config.get('algorithm', {})
    if algorithm is not None and not isinstance(algorithm, dict):
        raise ConfigValidationError("'algorithm' must be a dictionary")

    seed = config.get('random_seed')
    if seed is not None and (not isinstance(seed, int) or seed < 0):
        raise ConfigValidationError(f"'random_seed' must be a non-negative integer, got: {seed}")

    params = GeneticAlgorithmParams.from_dict(algorithm)
    params.raise_if_invalid()
    return params
