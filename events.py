"""
Daily cross-region stages and the news ticker.

After every region has been advanced, the world passes through an ordered
pipeline of named stages. The stages below are extension points: they are
wired into the day cycle but do not change the world yet.
"""

from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional, Sequence

from config import NEWS_HEADLINES
from logger import setup_logger

if TYPE_CHECKING:
    from world import WorldState

logger = setup_logger()

Stage = Callable[["WorldState"], "WorldState"]


class DailyStage(NamedTuple):
    name: str
    run: Stage


def calculate_emigrations(world: "WorldState") -> "WorldState":
    """
    Emigration and immigration between neighboring regions.

    Not modelled yet. Intended: unhappy, conflict-ridden or overpopulated
    regions push population towards richer, calmer neighbors.
    """
    return world


def calculate_conflicts(world: "WorldState") -> "WorldState":
    """
    International spread of large conflicts.

    Not modelled yet. Intended: high conflict levels raise the conflict level
    of neighboring regions.
    """
    return world


def calculate_indices(world: "WorldState") -> "WorldState":
    """
    Daily adjustment of derived indices and of the global deltas.

    Not modelled yet. Intended: food, finance, education and tech index
    corrections per region, plus feedback into co2ppm_delta and
    global_temp_diff_delta.
    """
    return world


def calculate_events(world: "WorldState") -> "WorldState":
    """
    Large-scale events affecting the entire world.

    Not modelled yet. Candidates:
    - natural disasters (esp. earthquakes, typhoon season)
    - man-made disasters (global malware spread, market crash, oil tanker sinking)
    - COVID or other large pandemics
    - sports events (esp. olympics)
    - a region reaching conflict > 7, causing a happiness drop and distress worldwide
    - introduction of online banking once a region has enough finance and tech,
      improving GDP and decreasing corruption
    """
    return world


# Order matters: scheduler wiring expects this sequence every day
DAILY_STAGES: List[DailyStage] = [
    DailyStage("emigration", calculate_emigrations),
    DailyStage("conflict_spread", calculate_conflicts),
    DailyStage("index_recalculation", calculate_indices),
    DailyStage("world_events", calculate_events),
]


def run_daily_stages(world: "WorldState", stages: Optional[Sequence[DailyStage]] = None) -> "WorldState":
    """Thread the world through each stage in order."""
    if stages is None:
        stages = DAILY_STAGES
    for stage in stages:
        world = stage.run(world)
        logger.debug(f"Day {world.day}: stage '{stage.name}' done")
    return world


def current_headline(day: int, headlines: Optional[Sequence[str]] = None, rotation_days: int = 14) -> str:
    """Headline on display for a given day; rotates every rotation_days."""
    if headlines is None:
        headlines = NEWS_HEADLINES
    if not headlines:
        return ""
    return headlines[(day // rotation_days) % len(headlines)]
