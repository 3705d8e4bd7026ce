"""
Region model and bounds policy.
A region ("continent section") is the unit of simulation state; the bounds
policy keeps every indicator inside its legal range after each update.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, NoReturn, Tuple
import math

from config import FIELD_BOUNDS, REGION_SEEDS
from economy import calculate_finance_index


class SimulationError(Exception):
    """Base class for errors raised by the simulation engine."""


class NonFiniteValueError(SimulationError, ValueError):
    """A region indicator became NaN; the model blew up and cannot be clamped."""

    def __init__(self, region_name: str, field_name: str):
        super().__init__(f"{region_name}: {field_name} is NaN")
        self.region_name = region_name
        self.field_name = field_name


class InvalidStateError(SimulationError, ValueError):
    """A loaded snapshot cannot be simulated."""


class UnreachableError(SimulationError):
    """Raised from branches that exhaustive handling should make impossible."""


class RegionName(str, Enum):
    """The closed set of simulated regions, in map order."""
    AFRICA = "Africa"
    ASIA = "Asia"
    EUROPE = "Europe"
    NORTH_AMERICA = "North America"
    CENTRAL_AMERICA = "Central America"
    SOUTH_AMERICA = "South America"
    ANTARCTICA = "Antarctica"
    AUSTRALIA = "Australia"
    RUSSIA = "Russia"

    def __str__(self) -> str:
        return self.value


Rectangle = Tuple[float, float, float, float]  # x, y, width, height


@dataclass(frozen=True)
class RegionState:
    """
    Indicators for one region. Rates and "delta" fields are per year; the
    daily update divides them by 365. Deltas are accelerations of their
    primary field (e.g. happiness_delta is the yearly change in happiness).
    """
    name: RegionName
    original_population: float
    total_population: float
    birth_rate: float  # births per 1000 per year
    birth_rate_delta: float
    life_expectancy: float  # years
    life_expectancy_delta: float
    gdp_capita: float  # PPP-adjusted USD
    gdp_capita_multiplier: float  # yearly growth fraction
    happiness: float
    happiness_delta: float
    food_index: float
    finance_index: float
    education_index: float
    tech_index: float
    tech_index_delta: float
    disease_index: float
    conflict_level: float
    corruption_index: float  # fraction of aid lost to corruption
    global_temp_diff_sensitivity: float
    neighbors: Tuple[RegionName, ...] = ()
    map_rect: Rectangle = (0, 0, 0, 0)


def clamp(low: float, high: float, value: float) -> float:
    """Restrict a number between a min/max."""
    return min(high, max(low, value))


def clamp_region(region: RegionState) -> RegionState:
    """Saturate every bounded indicator to its FIELD_BOUNDS range."""
    clamped = {}
    for field_name, (low, high) in FIELD_BOUNDS.items():
        value = getattr(region, field_name)
        if math.isnan(value):
            raise NonFiniteValueError(str(region.name), field_name)
        clamped[field_name] = float(clamp(low, high, value))
    return replace(region, **clamped)


def out_of_bounds_fields(region: RegionState) -> List[str]:
    """Names of bounded fields currently outside their legal range."""
    violations = []
    for field_name, (low, high) in FIELD_BOUNDS.items():
        value = getattr(region, field_name)
        if not low <= value <= high:
            violations.append(field_name)
    return violations


def assert_never(value: Any) -> NoReturn:
    """Fail loudly on a case that exhaustive handling should have covered."""
    raise UnreachableError(f"Unexpected value in exhaustive handling: {value!r}")


def region_seed(name: RegionName) -> RegionState:
    """Build the 2020 starting state for one region."""
    name = RegionName(name)
    if name.value not in REGION_SEEDS:
        assert_never(name)
    seed = REGION_SEEDS[name.value]

    values = {k: float(v) for k, v in seed.items() if k not in ("neighbors", "map_rect")}
    region = RegionState(
        name=name,
        original_population=values["total_population"],
        finance_index=calculate_finance_index(values["gdp_capita"]),
        neighbors=tuple(RegionName(n) for n in seed["neighbors"]),
        map_rect=tuple(seed["map_rect"]),
        **values
    )
    return clamp_region(region)


def initial_regions() -> Tuple[RegionState, ...]:
    """All regions in their fixed enumeration order."""
    return tuple(region_seed(name) for name in RegionName)


def region_to_dict(region: RegionState) -> Dict[str, Any]:
    """Serialize region state for data collection."""
    data = {}
    for f in fields(region):
        value = getattr(region, f.name)
        if f.name == "name":
            value = value.value
        elif f.name == "neighbors":
            value = [n.value for n in value]
        elif f.name == "map_rect":
            value = list(value)
        data[f.name] = value
    return data


def region_from_dict(data: Dict[str, Any]) -> RegionState:
    """
    Rebuild a region from region_to_dict output.

    Loaded values go through the bounds policy; a non-positive
    original_population is rejected since the daily update divides by it.
    """
    values = dict(data)
    values["name"] = RegionName(values["name"])
    values["neighbors"] = tuple(RegionName(n) for n in values.get("neighbors", ()))
    values["map_rect"] = tuple(values.get("map_rect", (0, 0, 0, 0)))
    region = RegionState(**values)
    if not region.original_population > 0:
        raise InvalidStateError(
            f"{region.name}: original_population must be positive, got {region.original_population}"
        )
    return clamp_region(region)
