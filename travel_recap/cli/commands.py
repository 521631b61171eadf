"""
CLI commands for Travel Recap.

Provides commands for summarizing a Google Timeline export, listing its
years, exporting the processed data as JSON and resolving coordinates to
countries.
"""

from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console

from ..analysis.advanced import calculate_advanced_stats
from ..analysis.report import TimelineReport
from ..analysis.statistics import calculate_stats, filter_segments_by_year
from ..core.config import get_settings, resolve_probability_threshold
from ..core.exceptions import ConfigError, TimelineError
from ..geodata.cache import GeodataCache, get_redis_client
from ..geodata.country_lookup import CountryLookup
from ..geodata.loader import load_country_lookup
from ..pipeline import IngestionResult, ingest_file

app = typer.Typer(
    name="travel-recap",
    help="Travel Recap - Yearly statistics from your Google Timeline export",
    add_completion=False
)
console = Console()
settings = get_settings()


def get_country_lookup(countries: Optional[str]) -> Optional[CountryLookup]:
    """Load country boundaries, through the Redis cache when enabled."""
    cache = None
    if settings.geodata_cache_enabled:
        cache = GeodataCache(get_redis_client())
    return load_country_lookup(countries, cache=cache)


def run_ingest(
    timeline_file: Path,
    lookup: Optional[CountryLookup] = None,
    probability_threshold: float = 0.0
) -> IngestionResult:
    """Ingest a timeline file, exiting with an error message on failure."""
    try:
        return ingest_file(timeline_file, lookup, probability_threshold)
    except TimelineError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[bold red]Error reading {timeline_file}: {e}[/bold red]")
        raise typer.Exit(1)


def load_timeline(
    timeline_file: Path,
    threshold: Optional[float],
    countries: Optional[str]
) -> tuple[IngestionResult, Optional[CountryLookup]]:
    """Resolve the threshold, load country boundaries and ingest."""
    try:
        probability_threshold = resolve_probability_threshold(threshold)
    except ConfigError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)

    lookup = get_country_lookup(countries)
    return run_ingest(timeline_file, lookup, probability_threshold), lookup


def pick_year(years: list[int], year: Optional[int], all_years: bool) -> Optional[int]:
    """Requested year, or the most recent one; None means every year."""
    if all_years or not years:
        return None
    if year is None:
        return years[0]
    if year not in years:
        console.print(f"[yellow]Warning: No data for {year}, available years: {', '.join(map(str, years))}")
    return year


timeline_argument = typer.Argument(
    ...,
    help="Path to Timeline.json file from Google Takeout",
    exists=True,
    file_okay=True,
    dir_okay=False
)
threshold_option = typer.Option(
    None,
    "--threshold",
    "-t",
    help="Minimum visit probability between 0 and 1 (default: PROBABILITY_THRESHOLD)"
)
countries_option = typer.Option(
    None,
    "--countries",
    "-c",
    help="Country boundaries GeoJSON path or URL (default: COUNTRIES_GEOJSON)"
)


@app.command()
def stats(
    timeline_file: Path = timeline_argument,
    year: Optional[int] = typer.Option(
        None,
        "--year",
        "-y",
        help="Year to summarize (default: most recent year in the file)"
    ),
    all_years: bool = typer.Option(
        False,
        "--all-years",
        help="Summarize every year together"
    ),
    threshold: Optional[float] = threshold_option,
    countries: Optional[str] = countries_option
):
    """
    Display a yearly recap of a Timeline export.

    Shows distance, visits, countries, transport modes, favorite places,
    carbon footprint, time distribution and records.
    """
    console.print("[bold blue]Travel Recap - Statistics[/bold blue]")
    console.print()

    result, lookup = load_timeline(timeline_file, threshold, countries)
    selected_year = pick_year(result.timeline.years, year, all_years)

    segments = filter_segments_by_year(result.timeline.segments, selected_year)
    if selected_year is None:
        year_stats = result.initial_stats
    else:
        year_stats = calculate_stats(segments, lookup)
    advanced = calculate_advanced_stats(segments)

    report = TimelineReport(
        year_stats,
        advanced,
        all_time_stats=result.initial_stats if selected_year is not None else None,
        year=selected_year
    )
    report.display()


@app.command()
def years(timeline_file: Path = timeline_argument):
    """
    List the years present in a Timeline export, newest first.
    """
    result = run_ingest(timeline_file)

    if not result.timeline.years:
        console.print("[yellow]No dated segments found")
        return

    for y in result.timeline.years:
        console.print(str(y))


@app.command()
def export(
    timeline_file: Path = timeline_argument,
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Where to write the JSON export",
        dir_okay=False
    ),
    year: Optional[int] = typer.Option(
        None,
        "--year",
        "-y",
        help="Also include statistics for this year"
    ),
    threshold: Optional[float] = threshold_option,
    countries: Optional[str] = countries_option
):
    """
    Export processed segments, locations and statistics as JSON.

    Keys use camelCase; advanced metrics cover every year unless --year is given.
    """
    result, lookup = load_timeline(timeline_file, threshold, countries)

    payload = result.to_payload()
    segments = filter_segments_by_year(result.timeline.segments, year)
    if year is not None:
        payload['year'] = year
        payload['yearStats'] = calculate_stats(segments, lookup).model_dump(mode='json', by_alias=True)
    payload['advancedStats'] = calculate_advanced_stats(segments).model_dump(mode='json', by_alias=True)

    try:
        with open(output, 'wb') as f:
            f.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
    except OSError as e:
        console.print(f"[bold red]Error writing {output}: {e}[/bold red]")
        raise typer.Exit(1)

    console.print(f"[green]Exported {len(result.timeline.segments):,} segments to {output}")


@app.command()
def country(
    lat: float = typer.Argument(..., help="Latitude in decimal degrees"),
    lng: float = typer.Argument(..., help="Longitude in decimal degrees"),
    countries: Optional[str] = countries_option
):
    """
    Resolve a coordinate to a country name using the boundary dataset.
    """
    lookup = get_country_lookup(countries)
    if lookup is None:
        console.print("[red]No country boundaries available; pass --countries or set COUNTRIES_GEOJSON")
        raise typer.Exit(1)

    name = lookup.get_country(lat, lng)
    if name is None:
        console.print(f"[yellow]No country found at {lat}, {lng}")
        raise typer.Exit(1)

    console.print(name)


if __name__ == "__main__":
    app()
