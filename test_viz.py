import pytest
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
from dataclasses import replace
from pathlib import Path
import tempfile

from config import SimulationConfig
from network_viz import NetworkVisualizer, build_neighbor_graph, find_asymmetric_links
from region import RegionName, region_to_dict
from viz import MAP_WIDTH, Visualizer, is_pacific_connection, neighbor_segments, rect_center
from world import advance_day, get_region_by_name, initial_world_state, replace_region, select_region, world_statistics


@pytest.fixture
def config():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield SimulationConfig(
            num_days=5,
            game_speed=1,
            output_dir=Path(tmpdir)
        )


@pytest.fixture
def world(config):
    return initial_world_state(config)


def test_create_region_map(config, world):
    """Test map generation with region boxes."""
    viz = Visualizer(config)
    output_file = config.output_dir / "region_map.png"

    viz.create_region_map(select_region(world, "Asia"), output_file)

    assert output_file.exists()
    assert output_file.stat().st_size > 0


def test_create_region_map_other_indicator(config, world):
    output_file = config.output_dir / "conflict_map.png"
    Visualizer(config).create_region_map(world, output_file, indicator="conflict_level")
    assert output_file.exists()


def test_plot_timeline_analysis(config, world):
    history = []
    for _ in range(5):
        history.append({
            "day": world.day,
            "events": [],
            "global_stats": world_statistics(world),
            "regions": [region_to_dict(cs) for cs in world.regions],
        })
        world = advance_day(world)

    output_file = config.output_dir / "timeline_analysis.png"
    Visualizer(config).plot_timeline_analysis(history, output_file)

    assert output_file.exists()
    assert output_file.stat().st_size > 0


def test_create_neighbor_network(config, world):
    output_file = config.output_dir / "neighbor_network.png"
    NetworkVisualizer(config).create_neighbor_network(world, output_file)
    assert output_file.exists()


class TestNeighborGraph:
    def test_nodes_and_edges(self, world):
        G = build_neighbor_graph(world)
        assert set(G.nodes) == {name.value for name in RegionName}
        assert G.number_of_edges() == 14
        assert G.has_edge("Africa", "Antarctica")
        assert not G.has_edge("Australia", "Europe")

    def test_node_attributes(self, world):
        G = build_neighbor_graph(world)
        europe = get_region_by_name(world, RegionName.EUROPE)
        assert G.nodes["Europe"]["population"] == europe.total_population
        assert G.nodes["Europe"]["pos"] == rect_center(europe.map_rect)

    def test_seed_links_are_symmetric(self, world):
        assert find_asymmetric_links(world) == []

    def test_one_way_link_detected(self, world):
        australia = get_region_by_name(world, RegionName.AUSTRALIA)
        world = replace_region(world, replace(australia, neighbors=()))
        assert find_asymmetric_links(world) == [(RegionName.ASIA, RegionName.AUSTRALIA)]


class TestMapGeometry:
    def test_rect_center(self):
        assert rect_center((600, 200, 170, 180)) == (685, 290)

    def test_pacific_connection(self):
        assert is_pacific_connection(RegionName.NORTH_AMERICA, RegionName.ASIA)
        assert is_pacific_connection(RegionName.RUSSIA, RegionName.NORTH_AMERICA)
        assert not is_pacific_connection(RegionName.NORTH_AMERICA, RegionName.EUROPE)

    def test_segments_per_listed_neighbor(self, world):
        segments = neighbor_segments(world)
        assert len(segments) == sum(len(cs.neighbors) for cs in world.regions)

    def test_pacific_links_wrap_to_edges(self, world):
        north_america = get_region_by_name(world, RegionName.NORTH_AMERICA)
        start = rect_center(north_america.map_rect)
        ends = [end for begin, end in neighbor_segments(world) if begin == start]
        assert any(end[0] == 0 for end in ends)

        russia = get_region_by_name(world, RegionName.RUSSIA)
        start = rect_center(russia.map_rect)
        ends = [end for begin, end in neighbor_segments(world) if begin == start]
        assert any(end[0] == MAP_WIDTH for end in ends)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
