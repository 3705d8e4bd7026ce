"""
Configuration and constants for the continent world simulation.
Seed values are based on 2020 data; most indices run on a 0-10 scale.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path


DAYS_PER_YEAR = 365


@dataclass
class SimulationConfig:
    """Run configuration with calibrated defaults."""

    num_days: int
    game_speed: int
    output_dir: Path

    # Scheduler (one in-game year takes two real minutes at speed 1)
    fps: int = 30
    year_length_millis: float = 120 * 1000
    max_game_speed: int = 9

    # Calendar
    start_date: date = date(2020, 1, 1)
    news_rotation_days: int = 14

    # Funding available for interventions (USD)
    initial_budget: float = 1e9

    # Global environment (NOAA / NASA 2020 figures)
    co2ppm: float = 412.5
    co2ppm_delta: float = 2.4  # ppm per year
    global_temp_diff: float = 1.02  # degrees C above pre-industrial
    global_temp_diff_delta: float = 0.02  # degrees C per year

    def get_frame_millis(self) -> float:
        """Return the length of one scheduler tick in milliseconds."""
        return 1000 / self.fps


# Post-update clamp range for every bounded region indicator
FIELD_BOUNDS = {
    "total_population": (0.0, 1e10),  # 10 billion is max for one continent
    "birth_rate": (0.0, 200.0),
    "birth_rate_delta": (-10.0, 10.0),
    "life_expectancy": (15.0, 250.0),
    "life_expectancy_delta": (-10.0, 50.0),
    "gdp_capita": (827.0, 1e12),
    "gdp_capita_multiplier": (-0.4, 0.8),
    "happiness": (0.0, 10.0),
    "happiness_delta": (-6.0, 6.0),
    "food_index": (0.0, 10.0),
    "finance_index": (0.0, 10.0),
    "education_index": (0.0, 10.0),
    "tech_index": (0.0, 100.0),
    "tech_index_delta": (-5.0, 50.0),
    "disease_index": (0.0, 100.0),
    "conflict_level": (0.0, 10.0),
    "corruption_index": (0.0, 1.0),
    "global_temp_diff_sensitivity": (-5.0, 5.0),
}

# Based on 2020 data from https://www.worldometers.info/geography/7-continents/
# finance_index is derived from gdp_capita when the seed is built.
REGION_SEEDS = {
    "Africa": {
        "total_population": 1340598147,
        "birth_rate": 33.3,
        "birth_rate_delta": -0.35,
        "life_expectancy": 63.4,
        "life_expectancy_delta": 0.3,
        "gdp_capita": 5300,
        "gdp_capita_multiplier": 0.02,
        "happiness": 4.5,
        "happiness_delta": 0.0,
        "food_index": 6.1,
        "education_index": 4.2,
        "tech_index": 3.1,
        "tech_index_delta": 0.12,
        "disease_index": 18.0,
        "conflict_level": 3.4,
        "corruption_index": 0.68,
        "global_temp_diff_sensitivity": 1.3,
        "neighbors": ["Europe", "Asia", "South America", "Antarctica"],
        "map_rect": (590, 380, 210, 280),
    },
    "Asia": {
        "total_population": 4641054775 - 144386830,  # Russia is its own region
        "birth_rate": 16.4,
        "birth_rate_delta": -0.2,
        "life_expectancy": 73.6,
        "life_expectancy_delta": 0.25,
        "gdp_capita": 14000,
        "gdp_capita_multiplier": 0.045,
        "happiness": 5.4,
        "happiness_delta": -0.01,
        "food_index": 7.8,
        "education_index": 6.3,
        "tech_index": 10.5,
        "tech_index_delta": 0.35,
        "disease_index": 9.5,
        "conflict_level": 2.1,
        "corruption_index": 0.61,
        "global_temp_diff_sensitivity": 1.0,
        "neighbors": ["Africa", "Australia", "Europe", "North America", "Russia"],
        "map_rect": (800, 310, 360, 250),
    },
    "Europe": {
        "total_population": 747636026,
        "birth_rate": 9.7,
        "birth_rate_delta": -0.05,
        "life_expectancy": 78.9,
        "life_expectancy_delta": 0.18,
        "gdp_capita": 41000,
        "gdp_capita_multiplier": 0.014,
        "happiness": 6.6,
        "happiness_delta": 0.0,
        "food_index": 9.5,
        "education_index": 8.4,
        "tech_index": 16.0,
        "tech_index_delta": 0.3,
        "disease_index": 3.8,
        "conflict_level": 0.6,
        "corruption_index": 0.36,
        "global_temp_diff_sensitivity": 0.8,
        "neighbors": ["Africa", "Asia", "North America", "Russia"],
        "map_rect": (600, 200, 170, 180),
    },
    "North America": {
        "total_population": 592072212,
        "birth_rate": 11.4,
        "birth_rate_delta": -0.08,
        "life_expectancy": 79.1,
        "life_expectancy_delta": 0.1,
        "gdp_capita": 60000,
        "gdp_capita_multiplier": 0.018,
        "happiness": 6.9,
        "happiness_delta": -0.01,
        "food_index": 9.4,
        "education_index": 8.7,
        "tech_index": 19.5,
        "tech_index_delta": 0.38,
        "disease_index": 4.2,
        "conflict_level": 0.9,
        "corruption_index": 0.27,
        "global_temp_diff_sensitivity": 0.9,
        "neighbors": ["Asia", "Europe", "Central America", "Russia"],
        "map_rect": (130, 150, 380, 250),
    },
    "Central America": {
        "total_population": 430759766,
        "birth_rate": 17.8,
        "birth_rate_delta": -0.22,
        "life_expectancy": 74.8,
        "life_expectancy_delta": 0.3,
        "gdp_capita": 13500,
        "gdp_capita_multiplier": 0.015,
        "happiness": 6.2,
        "happiness_delta": -0.015,
        "food_index": 8.2,
        "education_index": 6.1,
        "tech_index": 6.8,
        "tech_index_delta": 0.2,
        "disease_index": 7.3,
        "conflict_level": 2.4,
        "corruption_index": 0.64,
        "global_temp_diff_sensitivity": 0.9,
        "neighbors": ["North America", "South America"],
        "map_rect": (200, 400, 200, 90),
    },
    "South America": {
        "total_population": 430759766,
        "birth_rate": 15.2,
        "birth_rate_delta": -0.261,
        "life_expectancy": 73.6,
        "life_expectancy_delta": 0.37,
        "gdp_capita": 8560,
        "gdp_capita_multiplier": 0.012,
        "happiness": 6.163400173,
        "happiness_delta": -0.021,
        "food_index": 9.12,
        "education_index": 6.72,
        "tech_index": 7.4,
        "tech_index_delta": 0.24,
        "disease_index": 6.4,
        "conflict_level": 1.1,
        "corruption_index": 0.505747126,
        "global_temp_diff_sensitivity": 0.7,
        "neighbors": ["Africa", "Central America", "Antarctica"],
        "map_rect": (350, 490, 170, 270),
    },
    "Antarctica": {
        "total_population": 2687,
        "birth_rate": 0.5,
        "birth_rate_delta": 0.0,
        "life_expectancy": 80.0,
        "life_expectancy_delta": 0.0,
        "gdp_capita": 50000,
        "gdp_capita_multiplier": 0.0,
        "happiness": 7.0,
        "happiness_delta": 0.0,
        "food_index": 8.0,
        "education_index": 9.5,
        "tech_index": 25.0,
        "tech_index_delta": 0.2,
        "disease_index": 1.0,
        "conflict_level": 0.0,
        "corruption_index": 0.05,
        "global_temp_diff_sensitivity": 2.5,
        "neighbors": ["Africa", "South America"],
        "map_rect": (100, 800, 1180, 97),
    },
    "Australia": {
        "total_population": 42677813,
        "birth_rate": 12.6,
        "birth_rate_delta": -0.06,
        "life_expectancy": 82.9,
        "life_expectancy_delta": 0.15,
        "gdp_capita": 49000,
        "gdp_capita_multiplier": 0.02,
        "happiness": 7.2,
        "happiness_delta": 0.0,
        "food_index": 9.6,
        "education_index": 9.0,
        "tech_index": 15.5,
        "tech_index_delta": 0.3,
        "disease_index": 3.1,
        "conflict_level": 0.3,
        "corruption_index": 0.23,
        "global_temp_diff_sensitivity": 1.4,
        "neighbors": ["Asia"],
        "map_rect": (1050, 560, 230, 150),
    },
    "Russia": {
        "total_population": 144386830,
        "birth_rate": 11.5,
        "birth_rate_delta": -0.1,
        "life_expectancy": 72.6,
        "life_expectancy_delta": 0.2,
        "gdp_capita": 27000,
        "gdp_capita_multiplier": 0.012,
        "happiness": 5.5,
        "happiness_delta": -0.02,
        "food_index": 8.7,
        "education_index": 7.8,
        "tech_index": 11.2,
        "tech_index_delta": 0.25,
        "disease_index": 6.0,
        "conflict_level": 1.8,
        "corruption_index": 0.72,
        "global_temp_diff_sensitivity": 1.1,
        "neighbors": ["Asia", "Europe", "North America"],
        "map_rect": (770, 170, 550, 140),
    },
}

# Rotating news ticker shown in the top panel
NEWS_HEADLINES = [
    "Finland named happiest country on earth!",
    "Olympics delayed due to COVID-19.",
    "Natural disasters ravaging Australia. Population unhappy. But everything will be fine again.",
    "UN doing a great job of keeping the world happy.",
]
