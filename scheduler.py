"""
Fixed-rate game loop.
Converts elapsed real time into simulated days and drains the player's
queued interventions once per tick.
"""

from dataclasses import replace
from typing import List, Optional, Union

from config import DAYS_PER_YEAR, SimulationConfig
from interventions import Intervention, InterventionResult, apply_interventions
from logger import setup_logger
from region import RegionName
from world import WorldState, advance_day, clear_selection, select_region

logger = setup_logger()


def day_length_millis(game_speed: int, year_length_millis: float) -> float:
    """Real milliseconds per simulated day at the given speed."""
    if game_speed <= 0:
        raise ValueError("Paused games have no day length")
    return year_length_millis / DAYS_PER_YEAR / game_speed


class GameLoop:
    """Owns the current world snapshot and replaces it every tick."""

    def __init__(self, world: WorldState, config: SimulationConfig):
        self.config = config
        self._world = replace(world, game_speed=self._checked_speed(world.game_speed))
        self._queue: List[Intervention] = []
        self.last_results: List[InterventionResult] = []
        self.days_advanced = 0
        self._time_until_day = self._next_day_millis()

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def pending(self) -> List[Intervention]:
        return list(self._queue)

    def _next_day_millis(self) -> float:
        if self._world.game_speed <= 0:
            return 0.0
        return day_length_millis(self._world.game_speed, self.config.year_length_millis)

    def queue_intervention(self, intervention: Intervention) -> None:
        self._queue.append(intervention)

    def _checked_speed(self, game_speed: int) -> int:
        """Reject negative speeds and cap at config.max_game_speed."""
        if game_speed < 0:
            raise ValueError(f"Game speed must be non-negative, got {game_speed}")
        return min(game_speed, self.config.max_game_speed)

    def set_game_speed(self, game_speed: int) -> None:
        """Change speed; 0 pauses. The countdown restarts at the new pace."""
        game_speed = self._checked_speed(game_speed)
        self._world = replace(self._world, game_speed=game_speed)
        self._time_until_day = self._next_day_millis()
        logger.debug(f"Game speed set to {game_speed}")

    def select_region(self, name: Optional[Union[RegionName, str]]) -> None:
        if name is None:
            self._world = clear_selection(self._world)
        else:
            self._world = select_region(self._world, name)

    def tick(self, elapsed_millis: Optional[float] = None) -> WorldState:
        """
        One scheduler frame: apply queued interventions to the selected region,
        then advance a day for every day boundary crossed.
        """
        if elapsed_millis is None:
            elapsed_millis = self.config.get_frame_millis()

        self.apply_queued()

        if self._world.game_speed > 0:
            self._time_until_day -= elapsed_millis
            while self._time_until_day < 0:
                self._time_until_day += self._next_day_millis()
                self._advance()

        return self._world

    def run_days(self, num_days: int) -> WorldState:
        """Advance exactly num_days, ignoring real time; queued interventions go first."""
        self.apply_queued()
        for _ in range(num_days):
            self._advance()
        return self._world

    def apply_queued(self) -> List[InterventionResult]:
        """Drain the queue against the selected region; returns this drain's results."""
        if self._queue:
            queued, self._queue = self._queue, []
            self._world, self.last_results = apply_interventions(self._world, queued)
            return self.last_results
        return []

    def _advance(self) -> None:
        self._world = advance_day(self._world)
        self.days_advanced += 1
        if self._world.day % DAYS_PER_YEAR == 0:
            logger.info(f"Year {self._world.day // DAYS_PER_YEAR} complete")
