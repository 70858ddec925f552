"""
Example objective functions.

A closed-form clear-sky energy model for solar panels whose tilt angles are
the design variables. It stands in for the radiative simulation a real
application would run and exists so the optimizer can be exercised end to
end from the command line.
"""

from typing import Any, Dict, Tuple

import numpy as np

from .config import ConfigValidationError, parse_enum
from .data_models import ObjectiveFunctionType
from .objective import DesignSpace, GeneSpec, ObjectiveFunction

SOLAR_CONSTANT = 1000.0  # W/m², clear-sky beam irradiance at air mass 1
DIFFUSE_FRACTION = 0.1
DAYS_IN_YEAR = 365


def solar_declination(day_of_year: int) -> float:
    """Solar declination in radians (Cooper's equation)."""
    return np.radians(23.45) * np.sin(np.radians(360.0 * (284 + day_of_year) / DAYS_IN_YEAR))


def daily_energy(
    tilt: float,
    latitude: float,
    day_of_year: int,
    panel_area: float = 2.0,
    efficiency: float = 0.2,
    time_step: float = 0.25
) -> float:
    """
    Energy (kWh) produced in one day by an equator-facing panel.

    Args:
        tilt: Tilt angle in radians; positive tilts toward the equator
        latitude: Site latitude in radians
        day_of_year: Day number, 1-365
        panel_area: Panel area in m²
        efficiency: Conversion efficiency
        time_step: Integration step in hours

    Returns:
        Energy in kWh
    """
    delta = solar_declination(day_of_year)
    hours = np.arange(0.0, 24.0, time_step) + time_step / 2
    omega = np.radians(15.0 * (hours - 12.0))

    cos_zenith = np.sin(latitude) * np.sin(delta) + np.cos(latitude) * np.cos(delta) * np.cos(omega)
    daylight = cos_zenith > 0
    if not daylight.any():
        return 0.0

    cos_zenith = cos_zenith[daylight]
    omega = omega[daylight]
    air_mass = 1.0 / cos_zenith
    beam = SOLAR_CONSTANT * np.power(0.7, np.power(air_mass, 0.678))

    cos_incidence = (
        np.sin(latitude - tilt) * np.sin(delta)
        + np.cos(latitude - tilt) * np.cos(delta) * np.cos(omega)
    )
    direct = beam * np.clip(cos_incidence, 0.0, None)
    diffuse = DIFFUSE_FRACTION * beam * (1.0 + np.cos(tilt)) / 2.0

    power = panel_area * efficiency * (direct + diffuse)
    return float(power.sum() * time_step / 1000.0)


class TiltAngleObjective(ObjectiveFunction):
    """
    Output of a row of independently tilted solar panels.

    Each gene is one panel's tilt, mapped linearly onto [-90°, 90°].
    """

    def __init__(
        self,
        panel_count: int = 1,
        latitude: float = 42.0,
        objective_type: ObjectiveFunctionType = ObjectiveFunctionType.DAILY_TOTAL_OUTPUT,
        day_of_year: int = 172,
        days_per_year: int = 12,
        panel_area: float = 2.0,
        efficiency: float = 0.2,
        price_per_kwh: float = 0.15,
        daily_cost: float = 0.0
    ):
        if panel_count < 1:
            raise ValueError(f"panel_count must be positive, got {panel_count}")
        if not 1 <= day_of_year <= DAYS_IN_YEAR:
            raise ValueError(f"day_of_year must lie in [1, {DAYS_IN_YEAR}], got {day_of_year}")
        if days_per_year < 1:
            raise ValueError(f"days_per_year must be positive, got {days_per_year}")
        self.panel_count = panel_count
        self.latitude = np.radians(latitude)
        self.objective_type = objective_type
        self.day_of_year = day_of_year
        self.days_per_year = days_per_year
        self.panel_area = panel_area
        self.efficiency = efficiency
        self.price_per_kwh = price_per_kwh
        self.daily_cost = daily_cost
        self.design_space = DesignSpace([
            GeneSpec(name=f"Panel {k + 1}", minimum=-90.0, maximum=90.0, unit="°")
            for k in range(panel_count)
        ])

    def _sample_days(self) -> np.ndarray:
        # Mid-points of days_per_year equal slices of the year
        step = DAYS_IN_YEAR / self.days_per_year
        return (np.arange(self.days_per_year) * step + step / 2).astype(int) + 1

    def _panel_energy(self, tilt: float) -> float:
        if self.objective_type.is_yearly:
            days = self._sample_days()
            sampled = sum(
                daily_energy(tilt, self.latitude, int(d), self.panel_area, self.efficiency)
                for d in days
            )
            return sampled * DAYS_IN_YEAR / len(days)
        return daily_energy(tilt, self.latitude, self.day_of_year, self.panel_area, self.efficiency)

    def evaluate(self, genes: np.ndarray) -> float:
        if len(genes) != self.panel_count:
            raise ValueError(f"Expected {self.panel_count} genes, got {len(genes)}")
        tilts = np.radians([value for value in self.design_space.decode(genes).values()])
        total = sum(self._panel_energy(t) for t in tilts)

        if self.objective_type in (ObjectiveFunctionType.DAILY_AVERAGE_OUTPUT,
                                   ObjectiveFunctionType.YEARLY_AVERAGE_OUTPUT):
            return total / self.panel_count
        if self.objective_type in (ObjectiveFunctionType.DAILY_PROFIT,
                                   ObjectiveFunctionType.YEARLY_PROFIT):
            days = DAYS_IN_YEAR if self.objective_type.is_yearly else 1
            return total * self.price_per_kwh - self.daily_cost * days
        return total


TILT_ANGLE_PARAMETERS = (
    'panel_count', 'latitude', 'day_of_year', 'days_per_year',
    'panel_area', 'efficiency', 'price_per_kwh', 'daily_cost',
)


def _build_tilt_angle(problem_config: Dict[str, Any]) -> TiltAngleObjective:
    params = {k: v for k, v in problem_config.items() if k not in ('name', 'objective_type')}
    unknown = sorted(set(params) - set(TILT_ANGLE_PARAMETERS))
    if unknown:
        raise ConfigValidationError(f"Unknown problem parameter(s): {', '.join(unknown)}")
    objective_type = parse_enum(
        ObjectiveFunctionType,
        problem_config.get('objective_type', ObjectiveFunctionType.DAILY_TOTAL_OUTPUT)
    )
    return TiltAngleObjective(objective_type=objective_type, **params)


PROBLEMS = {
    'solar_panel_tilt_angle': _build_tilt_angle,
}


def build_objective(problem_config: Dict[str, Any]) -> Tuple[ObjectiveFunction, DesignSpace]:
    """
    Create an objective and its design space from a problem configuration.

    Args:
        problem_config: Dict with 'name' (registry key) plus problem parameters

    Returns:
        Tuple of (objective, design_space)

    Raises:
        ValueError: If the problem name is unknown
        ConfigValidationError: If the problem parameters or objective type are invalid
    """
    name = problem_config.get('name')
    if name not in PROBLEMS:
        raise ValueError(f"Unknown problem: {name}. Available: {', '.join(sorted(PROBLEMS))}")
    objective = PROBLEMS[name](problem_config)
    return objective, objective.design_space
