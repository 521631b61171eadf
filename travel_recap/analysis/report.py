"""
Terminal report for timeline statistics, rendered as rich tables.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from .insights import (
    primary_emitter,
    time_split,
    top_places,
    top_transport,
    transport_label,
    trees_to_offset,
    world_coverage_percent,
)
from ..core.config import get_settings
from ..core.models import AdvancedStats, TimelineStats

console = Console()
settings = get_settings()


class TimelineReport:
    """Render statistics for one year (or all years) of a timeline."""

    def __init__(
        self,
        stats: TimelineStats,
        advanced: AdvancedStats,
        all_time_stats: Optional[TimelineStats] = None,
        year: Optional[int] = None
    ):
        self.stats = stats
        self.advanced = advanced
        self.all_time_stats = all_time_stats
        self.year = year

    def display(self):
        """Display every section."""
        title = f"Your {self.year} Timeline" if self.year else "Your Timeline"
        console.print(f"[bold blue]{title}[/bold blue]")
        console.print()

        self.display_overview_table()
        self.display_transport_table()
        self.display_top_places_table()
        self.display_eco_table()
        self.display_time_table()
        self.display_records_table()
        if self.all_time_stats is not None:
            self.display_all_time_table()

    def display_overview_table(self):
        """Display distance, visits and countries."""
        stats = self.stats

        table = Table(title="Overview", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right", style="green")

        table.add_row("Total Distance", f"{round(stats.total_distance_km):,} km")
        table.add_row("Places Visited", f"{stats.total_visits:,}")
        table.add_row("Countries", f"{len(stats.countries):,}")

        coverage = world_coverage_percent(len(stats.countries))
        table.add_row("World Explored", f"{coverage}%" if coverage is not None else "--%")

        console.print(table)
        if stats.countries:
            console.print(f"[dim]Countries: {', '.join(sorted(stats.countries))}")
        console.print()

    def display_transport_table(self):
        """Display transport mode breakdown."""
        modes = top_transport(self.stats.transport, settings.top_transport_limit)

        if not modes:
            console.print("[yellow]No transport mode data available")
            console.print()
            return

        table = Table(title="Travel Modes", show_header=True, header_style="bold cyan")
        table.add_column("Mode", style="cyan")
        table.add_column("Trips", justify="right", style="green")
        table.add_column("Distance (km)", justify="right", style="yellow")
        table.add_column("Time (hrs)", justify="right", style="magenta")

        for activity_type, data in modes:
            table.add_row(
                transport_label(activity_type),
                f"{data.count:,}",
                f"{round(data.distance_meters / 1000):,}",
                f"{round(data.duration_ms / 3_600_000):,}"
            )

        console.print(table)
        console.print()

    def display_top_places_table(self):
        """Display most visited named places."""
        places = top_places(self.stats.visits, settings.top_places_limit)

        if not places:
            console.print("[yellow]Visit names could not be determined from the loaded data")
            console.print()
            return

        table = Table(title="Favorite Places", show_header=True, header_style="bold cyan")
        table.add_column("Place", style="cyan", no_wrap=False)
        table.add_column("Visits", justify="right", style="green")
        table.add_column("Country", style="dim")

        for place in places:
            table.add_row(place.name[:50], f"{place.count:,}", place.country or "")

        console.print(table)
        console.print()

    def display_eco_table(self):
        """Display carbon footprint estimate."""
        eco = self.advanced.eco

        table = Table(title="Eco Impact", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right", style="green")

        table.add_row("Est. Carbon Footprint", f"{round(eco.total_co2 / 1000):,} kg CO2")
        table.add_row("Trees to Offset", f"{trees_to_offset(eco.total_co2):,} trees")
        table.add_row("Primary Source", primary_emitter(eco))

        console.print(table)
        console.print()

    def display_time_table(self):
        """Display moving vs. stationary time."""
        split = time_split(self.advanced.time)

        table = Table(title="Time Distribution", show_header=True, header_style="bold cyan")
        table.add_column("State", style="dim")
        table.add_column("Share", justify="right", style="green")
        table.add_column("Hours", justify="right", style="yellow")

        table.add_row("Stationary (Visits)", f"{split['stationary_pct']}%", f"{round(split['stationary_hours']):,}")
        table.add_row("On the Move (Travel)", f"{split['moving_pct']}%", f"{round(split['moving_hours']):,}")

        console.print(table)
        console.print()

    def display_records_table(self):
        """Display record breakers."""
        records = self.advanced.records

        table = Table(title="Record Breakers", show_header=True, header_style="bold cyan")
        table.add_column("Record", style="dim")
        table.add_column("Distance", justify="right", style="green")

        table.add_row("Longest Drive", f"{records.longest_drive / 1000:.1f} km")
        table.add_row("Longest Walk", f"{records.longest_walk / 1000:.1f} km")

        console.print(table)
        console.print()

    def display_all_time_table(self):
        """Display totals across every year."""
        stats = self.all_time_stats

        table = Table(title="All Time", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right", style="green")

        table.add_row("Total Distance", f"{round(stats.total_distance_km):,} km")
        table.add_row("Total Visits", f"{stats.total_visits:,}")
        table.add_row("Countries", f"{len(stats.countries):,}")

        console.print(table)
