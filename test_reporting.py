import json
import pytest
from dataclasses import replace
from datetime import date
from pathlib import Path
import tempfile

from config import SimulationConfig
from events import current_headline
from region import RegionName, region_seed, region_to_dict
from reporting import ReportGenerator, calendar_date, format_with_million, region_summary, region_summary_text
from world import advance_day, get_selected_region, initial_world_state, select_region, world_statistics


@pytest.fixture
def config():
    return SimulationConfig(
        num_days=2,
        game_speed=1,
        output_dir=Path(".")
    )


def _record(world, events):
    return {
        "day": world.day,
        "events": events,
        "global_stats": world_statistics(world),
        "regions": [region_to_dict(cs) for cs in world.regions],
    }


def test_generate_report(config):
    """Test HTML report generation."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_dir = Path(tmpdir)
        generator = ReportGenerator(config)

        world = initial_world_state(config)
        history = [_record(world, ["Simulation started"])]
        for _ in range(2):
            world = advance_day(world)
            history.append(_record(world, []))
        history[-1]["events"].append("Education reform funded in Europe")

        report_path = generator.generate_report(history, output_dir)

        assert report_path.exists()
        content = report_path.read_text()

        assert "Existential Risk World Run" in content
        assert "Education reform funded in Europe" in content
        assert "NEWS: Finland named happiest country on earth!" in content
        assert "2020-01-03" in content  # Final date
        assert "Final Date (2 days)" in content
        for name in RegionName:
            assert name.value in content
        assert "timeline_analysis.png" not in content, "No chart was rendered"


def test_report_counts_days_of_resumed_run(config):
    with tempfile.TemporaryDirectory() as tmpdir:
        world = replace(initial_world_state(config), day=100)
        history = [_record(world, [])]
        for _ in range(3):
            world = advance_day(world)
            history.append(_record(world, []))

        content = ReportGenerator(config).generate_report(history, Path(tmpdir)).read_text()

        assert "Final Date (3 days)" in content
        assert str(calendar_date(103)) in content


def test_report_links_existing_charts(config):
    with tempfile.TemporaryDirectory() as tmpdir:
        output_dir = Path(tmpdir)
        (output_dir / "region_map.png").write_bytes(b"")
        world = initial_world_state(config)

        content = ReportGenerator(config).generate_report([_record(world, [])], output_dir).read_text()

        assert 'src="region_map.png"' in content
        assert 'src="neighbor_network.png"' not in content


class TestFormatting:
    def test_calendar_date(self):
        assert calendar_date(0) == date(2020, 1, 1)
        assert calendar_date(31) == date(2020, 2, 1)
        assert calendar_date(366) == date(2021, 1, 1)  # 2020 is a leap year

    def test_format_with_million_truncates(self):
        assert format_with_million(1340598147) == "1340.5 million"
        assert format_with_million(747636026) == "747.6 million"
        assert format_with_million(99999) == "0.0 million"

    def test_headline_rotation(self):
        first = current_headline(0)
        assert current_headline(13) == first
        assert current_headline(14) != first
        assert current_headline(56) == first
        assert current_headline(3, headlines=[]) == ""


class TestRegionSummary:
    def test_hides_internal_fields(self):
        summary = region_summary(region_seed(RegionName.EUROPE))
        assert "original_population" not in summary
        assert "map_rect" not in summary
        assert list(summary)[0] == "name"

    def test_values(self):
        summary = region_summary(region_seed(RegionName.EUROPE))
        assert summary["name"] == "Europe"
        assert summary["total_population"] == "747.6 million"
        assert summary["happiness"] == "6.60"
        assert summary["gdp_capita"] == "41000"
        assert summary["neighbors"] == "Africa, Asia, North America, Russia"

    def test_antarctica_shows_head_count(self):
        summary = region_summary(region_seed(RegionName.ANTARCTICA))
        assert summary["total_population"] == "2687"

    def test_text_block(self):
        text = region_summary_text(region_seed(RegionName.AUSTRALIA))
        assert text.splitlines()[0] == "name: Australia"
        assert "neighbors: Asia" in text


class TestRunnerOutput:
    def test_history_record_is_plain_json(self, config):
        from main import history_record
        record = history_record(advance_day(initial_world_state(config)), ["Something happened"])
        assert json.loads(json.dumps(record)) == record

    def test_dashboard_shows_selected_region(self, config):
        from main import create_dashboard
        world = select_region(initial_world_state(config), RegionName.EUROPE)

        layout = create_dashboard(world, config, 10, [])

        panel = layout["selected"].renderable
        assert panel.renderable == region_summary_text(get_selected_region(world))
        assert "World GDP" in layout["stats"].renderable.renderable

    def test_dashboard_without_selection(self, config):
        from main import create_dashboard
        layout = create_dashboard(initial_world_state(config), config, 10, [])
        assert layout["selected"].renderable.renderable == "No region selected."
