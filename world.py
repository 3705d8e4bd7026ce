"""
World simulation orchestration.
Holds the immutable world snapshot and the daily update rules that turn one
day's state into the next.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple, Union
import numpy as np

from config import DAYS_PER_YEAR, SimulationConfig
from economy import calculate_finance_index, regional_gdp
from events import DailyStage, run_daily_stages
from logger import setup_logger
from region import (
    RegionName,
    RegionState,
    clamp_region,
    initial_regions,
    region_from_dict,
    region_to_dict,
)

logger = setup_logger()

Point = Tuple[float, float]


@dataclass(frozen=True)
class WorldState:
    """Global simulation snapshot; replaced wholesale every tick."""

    day: int = 0  # days since config.start_date
    game_speed: int = 1
    global_budget: float = 0.0
    co2ppm: float = 0.0
    co2ppm_delta: float = 0.0
    global_temp_diff: float = 0.0
    global_temp_diff_delta: float = 0.0
    regions: Tuple[RegionState, ...] = field(default_factory=tuple)
    selected_region_name: Optional[RegionName] = None


def initial_world_state(config: SimulationConfig) -> WorldState:
    """Create the 2020 starting world."""
    world = WorldState(
        day=0,
        game_speed=config.game_speed,
        global_budget=config.initial_budget,
        co2ppm=config.co2ppm,
        co2ppm_delta=config.co2ppm_delta,
        global_temp_diff=config.global_temp_diff,
        global_temp_diff_delta=config.global_temp_diff_delta,
        regions=initial_regions(),
    )
    logger.info(f"Initialized world with {len(world.regions)} regions")
    return world


# --------------------------------------------------------------------------- #
# Region update rule
# --------------------------------------------------------------------------- #

def integrate_region(world: WorldState, region: RegionState) -> RegionState:
    """
    Apply one day of the region update rule without clamping.

    Per-year quantities are divided by 365. Steps run in order and later
    steps read values already updated here (finance index from the new GDP,
    conflict from the new happiness). `world` is the previous day's snapshot.
    """
    cs = region
    days = DAYS_PER_YEAR

    population_ratio = cs.total_population / cs.original_population
    # Terms: births, natural deaths,
    # conflict deaths (1/10000 per year at level 1, ~1/10 at level 8),
    # disease deaths (index 10 => 4/1000 per year, 50 => 100/1000)
    population_delta = (
        (cs.total_population * cs.birth_rate / 1000)
        - (cs.total_population / cs.life_expectancy)
        - (cs.total_population / 10000 * 2.3 ** cs.conflict_level)
        - (cs.total_population / 1000 * (cs.disease_index / 5) ** 2)
    ) / days
    total_population = cs.total_population + population_delta

    birth_rate = cs.birth_rate + cs.birth_rate_delta / days
    # TODO: reversion term is linear; target curve is ratio 0.6=>0.01, 0.9=>0.005, 1.1=>-0.005, 1.4=>-0.01
    birth_rate_delta = cs.birth_rate_delta + (
        (cs.happiness - 6.5) / 300
        + 0.03 * (1 - population_ratio)
    ) / days

    life_expectancy = cs.life_expectancy + cs.life_expectancy_delta / days
    life_expectancy_delta = cs.life_expectancy_delta + (
        (cs.happiness - 6) / 30
        + cs.tech_index_delta / 5
        + (5 - cs.disease_index) / 10
    ) / days

    gdp_capita = cs.gdp_capita * (1 + cs.gdp_capita_multiplier / days)
    gdp_capita_multiplier = cs.gdp_capita_multiplier + (
        cs.tech_index_delta / 10
        - cs.corruption_index / 100
    ) / days

    happiness = cs.happiness + cs.happiness_delta / days
    if population_ratio > 0.7:
        overpopulation = (0.8 - population_ratio) * 0.001
    else:
        overpopulation = 0.004
    # People are apprehensive of very rapid technological change
    tech_shock = cs.tech_index_delta / 20 if cs.tech_index_delta > 0.4 else 0.0
    happiness_delta = cs.happiness_delta + (
        overpopulation
        + life_expectancy_delta / 20
        + (cs.finance_index - 4) / 200
        + (cs.education_index - 6) / 200
        + (cs.tech_index - 8) / 200
        - tech_shock
        - cs.conflict_level / 40
        - cs.global_temp_diff_sensitivity * world.global_temp_diff / 1.5 / 100
    ) / days

    food_index = cs.food_index + (
        min(5, cs.finance_index - 2) / 10
        - cs.conflict_level / 3
    ) / days

    finance_index = calculate_finance_index(max(0.0, gdp_capita))

    education_index = cs.education_index + (
        (food_index - 8) / 20
        + (happiness - 5.5) / 10
    ) / days

    tech_index = cs.tech_index + cs.tech_index_delta / days
    tech_index_delta = cs.tech_index_delta + (
        tech_index / 1000
        + education_index / 30
        - cs.conflict_level / 20
    ) / days

    # disease_index has no daily dynamics

    # Unhappiness feeds conflict; conflict decays on its own
    conflict_level = cs.conflict_level + (
        (6.5 - happiness)
        - cs.conflict_level / 3
    ) / days

    corruption_index = cs.corruption_index + (5.7 - happiness) / 20 / days

    return replace(
        cs,
        total_population=total_population,
        birth_rate=birth_rate,
        birth_rate_delta=birth_rate_delta,
        life_expectancy=life_expectancy,
        life_expectancy_delta=life_expectancy_delta,
        gdp_capita=gdp_capita,
        gdp_capita_multiplier=gdp_capita_multiplier,
        happiness=happiness,
        happiness_delta=happiness_delta,
        food_index=food_index,
        finance_index=finance_index,
        education_index=education_index,
        tech_index=tech_index,
        tech_index_delta=tech_index_delta,
        conflict_level=conflict_level,
        corruption_index=corruption_index,
    )


def advance_region(world: WorldState, region: RegionState) -> RegionState:
    """One simulated day for one region, clamped to legal bounds."""
    return clamp_region(integrate_region(world, region))


# --------------------------------------------------------------------------- #
# World update rule
# --------------------------------------------------------------------------- #

def advance_day(world: WorldState, stages: Optional[Sequence[DailyStage]] = None) -> WorldState:
    """Advance the whole world by one day."""
    next_world = replace(
        world,
        day=world.day + 1,
        co2ppm=world.co2ppm + world.co2ppm_delta / DAYS_PER_YEAR,
        global_temp_diff=world.global_temp_diff + world.global_temp_diff_delta / DAYS_PER_YEAR,
        # Regions read yesterday's snapshot, never a sibling's new values
        regions=tuple(advance_region(world, cs) for cs in world.regions),
    )
    return run_daily_stages(next_world, stages)


# --------------------------------------------------------------------------- #
# Lookup and selection
# --------------------------------------------------------------------------- #

def get_region_by_name(world: WorldState, name: Union[RegionName, str, None]) -> Optional[RegionState]:
    """Find a region by name; None when absent."""
    if name is None:
        return None
    for region in world.regions:
        if region.name == name:
            return region
    return None


def get_selected_region(world: WorldState) -> Optional[RegionState]:
    return get_region_by_name(world, world.selected_region_name)


def replace_region(world: WorldState, region: RegionState) -> WorldState:
    """Return a world where the region with the same name is swapped in."""
    regions = tuple(region if cs.name == region.name else cs for cs in world.regions)
    return replace(world, regions=regions)


def select_region(world: WorldState, name: Union[RegionName, str]) -> WorldState:
    """Select a region by name. Unknown names leave the world unchanged."""
    region = get_region_by_name(world, name)
    if region is None:
        logger.debug(f"Ignoring selection of unknown region {name!r}")
        return world
    return replace(world, selected_region_name=region.name)


def clear_selection(world: WorldState) -> WorldState:
    return replace(world, selected_region_name=None)


def is_within_rectangle(point: Point, rect: Sequence[float]) -> bool:
    """Check if the point lies strictly between the rectangle's corners."""
    x, y, width, height = rect
    return x < point[0] < x + width and y < point[1] < y + height


def region_at_point(world: WorldState, point: Point) -> Optional[RegionState]:
    """First region whose display rectangle contains the point."""
    for region in world.regions:
        if is_within_rectangle(point, region.map_rect):
            return region
    return None


def select_region_at(world: WorldState, point: Point) -> WorldState:
    """Map click: select the region under the point, or clear on a miss."""
    region = region_at_point(world, point)
    return replace(world, selected_region_name=region.name if region else None)


# --------------------------------------------------------------------------- #
# Statistics and serialization
# --------------------------------------------------------------------------- #

def world_statistics(world: WorldState) -> Dict[str, Any]:
    """Aggregate indicators for dashboards and reports."""
    stats = {
        "day": world.day,
        "total_population": 0.0,
        "average_happiness": 0.0,
        "median_happiness": 0.0,
        "average_conflict": 0.0,
        "max_conflict_region": None,
        "world_gdp": 0.0,
        "co2ppm": world.co2ppm,
        "global_temp_diff": world.global_temp_diff,
        "global_budget": world.global_budget,
    }
    if not world.regions:
        return stats

    populations = np.array([cs.total_population for cs in world.regions])
    happiness = np.array([cs.happiness for cs in world.regions])
    conflict = np.array([cs.conflict_level for cs in world.regions])
    output = np.array([regional_gdp(cs) for cs in world.regions])

    stats["total_population"] = float(populations.sum())
    stats["average_happiness"] = float(happiness.mean())
    stats["median_happiness"] = float(np.median(happiness))
    stats["average_conflict"] = float(conflict.mean())
    stats["max_conflict_region"] = world.regions[int(conflict.argmax())].name.value
    stats["world_gdp"] = float(output.sum())
    return stats


def world_to_dict(world: WorldState) -> Dict[str, Any]:
    """Serialize the world snapshot to JSON-compatible data."""
    return {
        "day": world.day,
        "game_speed": world.game_speed,
        "global_budget": world.global_budget,
        "co2ppm": world.co2ppm,
        "co2ppm_delta": world.co2ppm_delta,
        "global_temp_diff": world.global_temp_diff,
        "global_temp_diff_delta": world.global_temp_diff_delta,
        "selected_region_name": world.selected_region_name.value if world.selected_region_name else None,
        "regions": [region_to_dict(cs) for cs in world.regions],
    }


def world_from_dict(data: Dict[str, Any]) -> WorldState:
    """Rebuild a world snapshot from world_to_dict output."""
    selected = data.get("selected_region_name")
    return WorldState(
        day=int(data["day"]),
        game_speed=int(data.get("game_speed", 1)),
        global_budget=float(data.get("global_budget", 0.0)),
        co2ppm=float(data.get("co2ppm", 0.0)),
        co2ppm_delta=float(data.get("co2ppm_delta", 0.0)),
        global_temp_diff=float(data.get("global_temp_diff", 0.0)),
        global_temp_diff_delta=float(data.get("global_temp_diff_delta", 0.0)),
        regions=tuple(region_from_dict(r) for r in data.get("regions", [])),
        selected_region_name=RegionName(selected) if selected else None,
    )
