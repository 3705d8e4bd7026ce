"""
Visualization module for charts and the region overview map.
Generates matplotlib-based visual representations of simulation state.
"""

from typing import Dict, List, Tuple
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from matplotlib.collections import LineCollection
import numpy as np
from pathlib import Path

from config import FIELD_BOUNDS, SimulationConfig
from region import RegionName
from world import WorldState, get_region_by_name

MAP_WIDTH = 1400
MAP_HEIGHT = 900


def rect_center(rect) -> Tuple[float, float]:
    """Center point of an (x, y, width, height) rectangle."""
    x, y, width, height = rect
    return x + width / 2, y + height / 2


def is_pacific_connection(name1: RegionName, name2: RegionName) -> bool:
    """Links across the Pacific wrap around the map edges instead of crossing it."""
    west = {RegionName.ASIA, RegionName.RUSSIA}
    return (name1 == RegionName.NORTH_AMERICA and name2 in west) or \
           (name2 == RegionName.NORTH_AMERICA and name1 in west)


def neighbor_segments(world: WorldState) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Line segments between neighboring regions in map coordinates."""
    segments = []
    for cs in world.regions:
        for name in cs.neighbors:
            neighbor = get_region_by_name(world, name)
            if neighbor is None:
                continue
            start = rect_center(cs.map_rect)
            end = rect_center(neighbor.map_rect)
            if is_pacific_connection(cs.name, neighbor.name):
                mid_y = (start[1] + end[1]) / 2
                # America exits on the left edge, Eurasia on the right
                edge_x = 0 if cs.name == RegionName.NORTH_AMERICA else MAP_WIDTH
                segments.append((start, (edge_x, mid_y)))
            else:
                segments.append((start, end))
    return segments


class Visualizer:
    """Handles all visualization and plotting."""

    def __init__(self, config: SimulationConfig):
        self.config = config

    def create_region_map(self, world: WorldState, output_path: Path, indicator: str = "happiness"):
        """Draw region boxes coloured by an indicator, with neighbor links."""
        low, high = FIELD_BOUNDS.get(indicator, (0.0, 10.0))
        cmap = plt.cm.RdYlGn if indicator != "conflict_level" else plt.cm.Reds

        fig, ax = plt.subplots(figsize=(14, 9))
        ax.set_xlim(0, MAP_WIDTH)
        ax.set_ylim(MAP_HEIGHT, 0)  # Screen coordinates: y grows downwards

        ax.add_collection(LineCollection(neighbor_segments(world), colors='#101010', linewidths=1.5, alpha=0.6))

        for cs in world.regions:
            x, y, width, height = cs.map_rect
            value = getattr(cs, indicator)
            normalized = (value - low) / (high - low) if high > low else 0.0
            ax.add_patch(mpatches.Rectangle(
                (x, y), width, height,
                facecolor=cmap(float(np.clip(normalized, 0.0, 1.0))),
                edgecolor='#101010', linewidth=1.5, alpha=0.85
            ))
            cx, cy = rect_center(cs.map_rect)
            ax.text(cx, cy, f"{cs.name}\n{value:.2f}", ha='center', va='center', fontsize=9, fontweight='bold')
            if cs.name == world.selected_region_name:
                ax.add_patch(mpatches.Rectangle((x, y), width, height, fill=False, edgecolor='blue', linewidth=3))

        ax.set_title(f"Regions by {indicator.replace('_', ' ')} - day {world.day}", fontweight='bold')
        ax.set_aspect('equal')
        ax.axis('off')

        plt.savefig(output_path, dpi=100, bbox_inches='tight')
        plt.close(fig)

    def plot_timeline_analysis(self, history: List[Dict], output_path: Path):
        """Generate timeline analysis plots."""
        days = [h['day'] for h in history]

        fig, axes = plt.subplots(2, 2, figsize=(16, 12))
        fig.suptitle('Simulation Timeline Analysis', fontsize=16, fontweight='bold')

        # Population per region
        region_names = [r['name'] for r in history[0]['regions']] if history else []
        for name in region_names:
            series = [
                next(r['total_population'] for r in h['regions'] if r['name'] == name) / 1e9
                for h in history
            ]
            axes[0, 0].plot(days, series, linewidth=1.5, label=name)
        axes[0, 0].set_title('Population by Region')
        axes[0, 0].set_xlabel('Day')
        axes[0, 0].set_ylabel('Population (Billions)')
        axes[0, 0].grid(True, alpha=0.3)
        if region_names:
            axes[0, 0].legend(fontsize=7)

        # Happiness: average and median
        average = [h['global_stats']['average_happiness'] for h in history]
        median = [h['global_stats']['median_happiness'] for h in history]
        axes[0, 1].plot(days, average, linewidth=2, color='green', label='Average')
        axes[0, 1].plot(days, median, linewidth=2, color='teal', linestyle='--', label='Median')
        axes[0, 1].set_title('World Happiness')
        axes[0, 1].set_xlabel('Day')
        axes[0, 1].set_ylabel('Happiness (0-10)')
        axes[0, 1].grid(True, alpha=0.3)
        axes[0, 1].legend()

        # CO2 concentration
        co2 = [h['global_stats']['co2ppm'] for h in history]
        axes[1, 0].plot(days, co2, linewidth=2, color='gray')
        axes[1, 0].set_title('Atmospheric CO2')
        axes[1, 0].set_xlabel('Day')
        axes[1, 0].set_ylabel('ppm')
        axes[1, 0].grid(True, alpha=0.3)

        # Temperature anomaly
        temp = [h['global_stats']['global_temp_diff'] for h in history]
        axes[1, 1].plot(days, temp, linewidth=2, color='orange')
        axes[1, 1].set_title('Global Temperature Anomaly')
        axes[1, 1].set_xlabel('Day')
        axes[1, 1].set_ylabel('°C above pre-industrial')
        axes[1, 1].grid(True, alpha=0.3)
        axes[1, 1].axhline(y=1.5, color='r', linestyle='--', alpha=0.5, label='Paris 1.5°C')
        axes[1, 1].legend()

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)
