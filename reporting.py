import math
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Dict, Any
from jinja2 import Template

from config import SimulationConfig
from events import current_headline
from region import RegionName, RegionState, region_to_dict


def calendar_date(day: int, start: date = date(2020, 1, 1)) -> date:
    """In-game date for a day counter."""
    return start + timedelta(days=day)


def format_with_million(value: float) -> str:
    """Millions with one truncated decimal, e.g. 1340598147 -> '1340.5 million'."""
    return f"{math.floor(value / 100000) / 10} million"


def _format_number(value: float) -> str:
    return f"{value:.0f}" if value > 10 else f"{value:.2f}"


def region_summary(region: RegionState) -> Dict[str, str]:
    """Display values for the region panel, in field order."""
    values = region_to_dict(region)
    values.pop("original_population")
    values.pop("map_rect")

    summary = {}
    for key, value in values.items():
        if key == "total_population" and region.name != RegionName.ANTARCTICA:
            # Raw head count for Antarctica, millions everywhere else
            summary[key] = format_with_million(value)
        elif key == "neighbors":
            summary[key] = ", ".join(value)
        elif isinstance(value, (int, float)):
            summary[key] = _format_number(value)
        else:
            summary[key] = str(value)
    return summary


def region_summary_text(region: RegionState) -> str:
    return "\n".join(f"{key}: {value}" for key, value in region_summary(region).items())


class ReportGenerator:
    """Generates HTML reports for simulation results."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.template = self._get_template()

    def generate_report(self, history: List[Dict[str, Any]], output_dir: Path) -> Path:
        """Generate an HTML report from per-day history records."""
        global_stats = [h['global_stats'] for h in history]

        events = []
        last_headline = None
        for h in history:
            day = h['day']
            for event in h.get('events', []):
                events.append({"day": day, "date": str(calendar_date(day, self.config.start_date)), "message": event})
            headline = current_headline(day, rotation_days=self.config.news_rotation_days)
            if headline != last_headline:
                events.append({"day": day, "date": str(calendar_date(day, self.config.start_date)), "message": f"NEWS: {headline}"})
                last_headline = headline

        final_regions = []
        if history:
            for r in history[-1].get('regions', []):
                final_regions.append(r)

        final_day = history[-1]['day'] if history else 0

        html_content = self.template.render(
            simulation_name="Existential Risk World Run",
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            days=final_day - history[0]['day'] if history else 0,
            final_date=str(calendar_date(final_day, self.config.start_date)),
            final_stats=global_stats[-1] if global_stats else {},
            regions=final_regions,
            events=events,
            has_timeline=(output_dir / "timeline_analysis.png").exists(),
            has_map=(output_dir / "region_map.png").exists(),
            has_network=(output_dir / "neighbor_network.png").exists(),
        )

        report_path = output_dir / "index.html"
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(html_content)

        return report_path

    def _get_template(self) -> Template:
        """Return Jinja2 template for the report."""
        return Template("""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ simulation_name }} - Report</title>
    <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css" rel="stylesheet">
    <style>
        body { background-color: #f8f9fa; }
        .card { margin-bottom: 20px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); }
        .event-log { max-height: 500px; overflow-y: auto; font-family: monospace; font-size: 0.9em; }
        .stat-card { text-align: center; padding: 20px; }
        .stat-value { font-size: 2em; font-weight: bold; color: #0d6efd; }
        .stat-label { color: #6c757d; text-transform: uppercase; font-size: 0.8em; }
        img { max-width: 100%; height: auto; border-radius: 5px; }
    </style>
</head>
<body>
    <nav class="navbar navbar-dark bg-dark">
        <div class="container-fluid">
            <span class="navbar-brand mb-0 h1">🌍 {{ simulation_name }}</span>
            <span class="navbar-text">{{ timestamp }}</span>
        </div>
    </nav>

    <div class="container mt-4">
        <div class="row mb-4">
            <div class="col-md-3">
                <div class="card stat-card">
                    <div class="stat-value">{{ final_date }}</div>
                    <div class="stat-label">Final Date ({{ days }} days)</div>
                </div>
            </div>
            <div class="col-md-3">
                <div class="card stat-card">
                    <div class="stat-value">{{ "%.2f"|format(final_stats.total_population / 1e9) }}B</div>
                    <div class="stat-label">World Population</div>
                </div>
            </div>
            <div class="col-md-3">
                <div class="card stat-card">
                    <div class="stat-value">{{ "%.2f"|format(final_stats.average_happiness) }}</div>
                    <div class="stat-label">Average Happiness</div>
                </div>
            </div>
            <div class="col-md-3">
                <div class="card stat-card">
                    <div class="stat-value">${{ "%.1f"|format(final_stats.global_budget / 1e6) }}M</div>
                    <div class="stat-label">Remaining Budget</div>
                </div>
            </div>
        </div>

        <div class="row">
            <div class="col-md-8">
                {% if has_timeline %}
                <div class="card">
                    <div class="card-header fw-bold">Simulation Timeline</div>
                    <div class="card-body"><img src="timeline_analysis.png" alt="Timeline Analysis"></div>
                </div>
                {% endif %}
                {% if has_map %}
                <div class="card">
                    <div class="card-header fw-bold">Region Map</div>
                    <div class="card-body"><img src="region_map.png" alt="Region Map"></div>
                </div>
                {% endif %}
                {% if has_network %}
                <div class="card">
                    <div class="card-header fw-bold">Neighbor Network</div>
                    <div class="card-body"><img src="neighbor_network.png" alt="Neighbor Network"></div>
                </div>
                {% endif %}

                <div class="card">
                    <div class="card-header fw-bold">Regions</div>
                    <div class="card-body">
                        <table class="table table-sm table-striped">
                            <thead>
                                <tr><th>Region</th><th>Population (M)</th><th>Happiness</th><th>Conflict</th><th>Finance</th><th>Tech</th></tr>
                            </thead>
                            <tbody>
                                {% for r in regions %}
                                <tr>
                                    <td>{{ r.name }}</td>
                                    <td>{{ "%.1f"|format(r.total_population / 1e6) }}</td>
                                    <td>{{ "%.2f"|format(r.happiness) }}</td>
                                    <td>{{ "%.2f"|format(r.conflict_level) }}</td>
                                    <td>{{ "%.2f"|format(r.finance_index) }}</td>
                                    <td>{{ "%.1f"|format(r.tech_index) }}</td>
                                </tr>
                                {% endfor %}
                            </tbody>
                        </table>
                    </div>
                </div>
            </div>

            <div class="col-md-4">
                <div class="card">
                    <div class="card-header fw-bold">Event Log</div>
                    <div class="card-body event-log">
                        <input type="text" id="eventSearch" class="form-control mb-2" placeholder="Search events...">
                        <div id="eventList">
                            {% for event in events|reverse %}
                            <div class="event-item border-bottom py-1">
                                <span class="badge bg-secondary">{{ event.date }}</span>
                                {{ event.message }}
                            </div>
                            {% endfor %}
                        </div>
                    </div>
                </div>
            </div>
        </div>
    </div>

    <script>
        document.getElementById('eventSearch').addEventListener('keyup', function() {
            let filter = this.value.toLowerCase();
            let items = document.querySelectorAll('.event-item');
            items.forEach(function(item) {
                let text = item.textContent.toLowerCase();
                item.style.display = text.includes(filter) ? '' : 'none';
            });
        });
    </script>
</body>
</html>
        """)
