"""
End-to-end ingestion: raw JSON in, parsed timeline plus initial statistics out.

This is the boundary where "nothing usable in this file" becomes an error;
the parser and aggregators themselves only ever return empty results.
"""

from pathlib import Path
from typing import Any, Optional, Union

import orjson
from pydantic import BaseModel
from rich.console import Console

from .analysis.statistics import calculate_stats
from .core.exceptions import InvalidTimelineJSONError, NoSegmentsFoundError
from .core.models import ProcessedTimeline, TimelineStats
from .geodata.country_lookup import CountryLookup
from .importers.formats import get_segments_from_data
from .importers.timeline_parser import TimelineParser

console = Console(stderr=True)


class IngestionResult(BaseModel):
    """Parsed timeline and its statistics over all (filtered) segments."""

    timeline: ProcessedTimeline
    initial_stats: TimelineStats

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        payload = self.timeline.model_dump(mode='json', by_alias=True)
        payload['initialStats'] = self.initial_stats.model_dump(mode='json', by_alias=True)
        return payload


def decode_timeline(raw: Union[bytes, str]) -> Any:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise InvalidTimelineJSONError(f"Invalid JSON file: {e}") from e


def ingest(
    raw: Union[bytes, str],
    country_lookup: Optional[CountryLookup] = None,
    probability_threshold: float = 0.0
) -> IngestionResult:
    """
    Decode, parse and summarize a timeline export.

    Raises:
        InvalidTimelineJSONError: the input is not JSON
        NoSegmentsFoundError: no segments under either accepted layout
    """
    data = decode_timeline(raw)

    if not get_segments_from_data(data):
        raise NoSegmentsFoundError(data)

    parser = TimelineParser(country_lookup, probability_threshold)
    timeline = parser.parse(data)
    initial_stats = calculate_stats(timeline.segments, country_lookup)

    console.print(
        f"[green]Parsed {len(timeline.segments):,} segments, "
        f"{len(timeline.locations):,} locations across {len(timeline.years)} years"
    )
    return IngestionResult(timeline=timeline, initial_stats=initial_stats)


def ingest_file(
    timeline_file: Union[str, Path],
    country_lookup: Optional[CountryLookup] = None,
    probability_threshold: float = 0.0
) -> IngestionResult:
    """Read a timeline export from disk and ingest it."""
    with open(timeline_file, 'rb') as f:
        raw = f.read()
    return ingest(raw, country_lookup, probability_threshold)
