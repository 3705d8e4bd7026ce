"""
Existential Risk world simulation
Headless entry point: runs the daily region model, applies scheduled
interventions, and writes history, charts and an HTML report.
"""

import argparse
import json
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Tuple

from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.layout import Layout
from rich.panel import Panel

from config import SimulationConfig
from events import current_headline
from interventions import Intervention, Outcome, get_intervention
from logger import setup_logger
from network_viz import NetworkVisualizer
from region import RegionName, region_to_dict
from reporting import ReportGenerator, calendar_date, format_with_million, region_summary_text
from scheduler import GameLoop
from viz import Visualizer
from world import get_selected_region, initial_world_state, world_from_dict, world_statistics, world_to_dict, WorldState

logger = None
console = Console()


def parse_action(text: str) -> Tuple[int, RegionName, Intervention]:
    """Parse 'REGION:INTERVENTION@DAY', e.g. 'Europe:Education reform@30'."""
    try:
        target, day = text.rsplit("@", 1)
        region, name = target.split(":", 1)
        return int(day), RegionName(region.strip()), get_intervention(name.strip())
    except (ValueError, KeyError) as exc:
        raise argparse.ArgumentTypeError(f"Invalid action '{text}': {exc}")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for simulation configuration."""
    parser = argparse.ArgumentParser(
        description="Day-by-day continent simulation with funded interventions"
    )
    parser.add_argument(
        "--days", type=int, default=365,
        help="Number of days to simulate (default: 365)"
    )
    parser.add_argument(
        "--speed", type=int, default=1, choices=range(0, 10),
        help="Game speed recorded in the state, 0-9 (default: 1)"
    )
    parser.add_argument(
        "--budget", type=float, default=None,
        help="Initial intervention budget in USD (default: config value)"
    )
    parser.add_argument(
        "--action", type=parse_action, action="append", default=[],
        metavar="REGION:NAME@DAY",
        help="Fund an intervention on a given day; repeatable"
    )
    parser.add_argument(
        "--load-state", type=str, default=None,
        help="Resume from a world snapshot written by --save-state"
    )
    parser.add_argument(
        "--save-state", type=str, default=None,
        help="Write the final world snapshot to this JSON file"
    )
    parser.add_argument(
        "--output-dir", type=str, default="output",
        help="Directory for output files (default: output)"
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO",
        help="Logging verbosity level (default: INFO)"
    )
    parser.add_argument(
        "--no-viz", action="store_true",
        help="Skip chart generation for performance"
    )
    return parser.parse_args()


def history_record(world: WorldState, events: List[str]) -> Dict:
    """One row of the simulation history file."""
    return {
        "day": world.day,
        "events": events,
        "global_stats": world_statistics(world),
        "regions": [region_to_dict(cs) for cs in world.regions],
    }


def create_dashboard(world: WorldState, config: SimulationConfig, total_days: int, events: List[str]):
    """Create a rich layout dashboard."""
    layout = Layout()
    layout.split_column(
        Layout(name="header", size=3),
        Layout(name="main", ratio=1),
        Layout(name="footer", size=3)
    )

    today = calendar_date(world.day, config.start_date)
    layout["header"].update(Panel(
        f"🌍 Day {world.day}/{total_days} - {today.isoformat()} - "
        f"Budget: {world.global_budget / 1e6:.1f} million USD",
        style="bold blue"
    ))

    table = Table(title="Regions")
    table.add_column("Region", style="cyan")
    table.add_column("Population", style="green")
    table.add_column("Happiness")
    table.add_column("Conflict", style="red")
    table.add_column("Finance")
    table.add_column("Tech")
    for cs in world.regions:
        population = f"{cs.total_population:.0f}" if cs.name == RegionName.ANTARCTICA \
            else format_with_million(cs.total_population)
        table.add_row(
            cs.name.value, population, f"{cs.happiness:.2f}",
            f"{cs.conflict_level:.2f}", f"{cs.finance_index:.2f}", f"{cs.tech_index:.1f}"
        )

    stats = world_statistics(world)
    stats_text = (
        f"Average happiness: {stats['average_happiness']:.2f}\n"
        f"Median happiness: {stats['median_happiness']:.2f}\n"
        f"World GDP: {stats['world_gdp'] / 1e12:.1f} trillion USD\n"
        f"CO2: {stats['co2ppm']:.1f} ppm\n"
        f"Temperature: +{stats['global_temp_diff']:.2f}°C\n\n"
        + ("\n".join(f"• {e}" for e in events[-6:]) if events else "No interventions yet.")
    )

    selected = get_selected_region(world)
    selected_text = region_summary_text(selected) if selected else "No region selected."

    layout["main"].split_row(
        Layout(Panel(table, title="World"), name="world", ratio=2),
        Layout(Panel(stats_text, title="World stats", style="yellow"), name="stats", ratio=1),
        Layout(Panel(selected_text, title="Selected region", style="cyan"), name="selected", ratio=1)
    )
    layout["footer"].update(Panel(
        f"News: {current_headline(world.day, rotation_days=config.news_rotation_days)}",
        style="italic"
    ))
    return layout


def main():
    """Main simulation loop with live dashboard and final reporting."""
    global logger
    args = parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(exist_ok=True)

    logger = setup_logger(level_name=args.log_level, log_file=output_dir / "simulation.log")

    config = SimulationConfig(
        num_days=args.days,
        game_speed=args.speed,
        output_dir=output_dir
    )
    if args.budget is not None:
        config.initial_budget = args.budget

    if args.load_state:
        with open(args.load_state) as f:
            world = world_from_dict(json.load(f))
        console.print(f"[bold green]Resuming from day {world.day} ({args.load_state})[/bold green]")
    else:
        world = initial_world_state(config)
        console.print(f"[bold green]Initializing world with {len(world.regions)} regions...[/bold green]")

    loop = GameLoop(world, config)

    actions_by_day = defaultdict(list)
    for day, region_name, intervention in args.action:
        actions_by_day[day].append((region_name, intervention))

    start_day = loop.world.day
    history = [history_record(loop.world, [])]
    recent_events = []

    with Live(console=console, refresh_per_second=4) as live:
        for _ in range(config.num_days):
            day_events = []
            for region_name, intervention in actions_by_day.get(loop.world.day, []):
                loop.select_region(region_name)
                loop.queue_intervention(intervention)
                for result in loop.apply_queued():
                    if result.outcome == Outcome.APPLIED:
                        day_events.append(f"{intervention.name} funded in {region_name} (${result.cost / 1e6:.1f}M)")
                    elif result.outcome == Outcome.INSUFFICIENT_FUNDS:
                        day_events.append(f"{intervention.name} in {region_name} declined: insufficient funds")

            world = loop.run_days(1)
            history.append(history_record(world, day_events))
            recent_events = (recent_events + day_events)[-20:]

            live.update(create_dashboard(world, config, start_day + config.num_days, recent_events))

    logger.info(f"Simulated {loop.days_advanced} days, budget left ${loop.world.global_budget:,.0f}")

    history_file = output_dir / "simulation.json"
    with open(history_file, 'w') as f:
        json.dump(history, f, indent=2)
    console.print(f"[bold green]Simulation history saved to {history_file}[/bold green]")

    if args.save_state:
        with open(args.save_state, 'w') as f:
            json.dump(world_to_dict(loop.world), f, indent=2)
        console.print(f"[bold green]World snapshot saved to {args.save_state}[/bold green]")

    if not args.no_viz:
        console.print("[bold yellow]Generating charts...[/bold yellow]")
        visualizer = Visualizer(config)
        visualizer.plot_timeline_analysis(history, output_dir / "timeline_analysis.png")
        visualizer.create_region_map(loop.world, output_dir / "region_map.png")
        NetworkVisualizer(config).create_neighbor_network(loop.world, output_dir / "neighbor_network.png")

    reporter = ReportGenerator(config)
    report_path = reporter.generate_report(history, output_dir)

    console.print(f"[bold green]Report generated at: {report_path}[/bold green]")
    console.print("[bold blue]Simulation complete![/bold blue]")


if __name__ == "__main__":
    main()
