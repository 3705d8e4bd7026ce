"""
Network visualization of the region neighbor graph.
"""

import networkx as nx
import matplotlib.pyplot as plt
from typing import List, Tuple
from pathlib import Path

from config import SimulationConfig
from region import RegionName
from viz import rect_center
from world import WorldState


def build_neighbor_graph(world: WorldState) -> nx.Graph:
    """
    Undirected graph of region adjacency.
    Nodes carry population, happiness and conflict level.
    """
    G = nx.Graph()
    for cs in world.regions:
        G.add_node(
            cs.name.value,
            population=cs.total_population,
            happiness=cs.happiness,
            conflict=cs.conflict_level,
            pos=rect_center(cs.map_rect),
        )
    for cs in world.regions:
        for name in cs.neighbors:
            if name.value in G.nodes:
                G.add_edge(cs.name.value, name.value)
    return G


def find_asymmetric_links(world: WorldState) -> List[Tuple[RegionName, RegionName]]:
    """Pairs (a, b) where a lists b as neighbor but b does not list a."""
    listed = {cs.name: set(cs.neighbors) for cs in world.regions}
    missing = []
    for name, neighbors in listed.items():
        for other in neighbors:
            if other in listed and name not in listed[other]:
                missing.append((name, other))
    return missing


class NetworkVisualizer:
    def __init__(self, config: SimulationConfig):
        self.config = config

    def create_neighbor_network(self, world: WorldState, output_path: Path):
        """
        Visualize region adjacency.
        Nodes: Regions (size=population, color=conflict level)
        """
        G = build_neighbor_graph(world)

        plt.figure(figsize=(12, 8), facecolor='#1a1a1a')

        # Map layout keeps the graph readable as a world map
        pos = {n: (x, -y) for n, (x, y) in nx.get_node_attributes(G, 'pos').items()}

        populations = nx.get_node_attributes(G, 'population')
        conflicts = nx.get_node_attributes(G, 'conflict')
        node_sizes = [max(50.0, populations[n] / 5e6) for n in G.nodes()]
        node_colors = [conflicts[n] for n in G.nodes()]

        nx.draw_networkx_nodes(G, pos, node_size=node_sizes, node_color=node_colors,
                               cmap=plt.cm.Reds, vmin=0, vmax=10, alpha=0.9)
        nx.draw_networkx_edges(G, pos, edge_color='#44FF88', alpha=0.5, width=2)
        nx.draw_networkx_labels(G, pos, font_size=9, font_color='white')

        asymmetric = find_asymmetric_links(world)
        title = "Region Neighbor Network"
        if asymmetric:
            title += f" ({len(asymmetric)} one-way links)"
        plt.title(title, color='white', fontsize=16)
        plt.axis('off')
        plt.savefig(output_path, dpi=100, bbox_inches='tight', facecolor='#1a1a1a')
        plt.close()
