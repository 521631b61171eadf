"""
Timeline export parser: segments, map locations and years.

Handles both the Android/Web ``semanticSegments`` export and the iOS root
array export, applying the visit probability threshold once so every
downstream consumer sees the same filtered segments.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

import orjson
from rich.console import Console

from .formats import TimelineFormat, get_adapter
from .normalize import parse_lat_lng
from ..core.models import LocationPoint, ProcessedTimeline, Segment, Visit
from ..geodata.country_lookup import CountryLookup, resolve_country

console = Console(stderr=True)


def offset_time(start: Optional[datetime], offset_minutes: int) -> Optional[datetime]:
    """Start time shifted by a minute offset; None when either is unusable."""
    if start is None:
        return None
    try:
        return start + timedelta(minutes=offset_minutes)
    except (OverflowError, ValueError):
        return None


def visit_passes_probability_threshold(visit: Optional[Visit], threshold: float) -> bool:
    """
    Whether a visit is kept for the given threshold.

    Visits without a (parseable) probability are always kept, as is
    everything when the threshold is 0.
    """
    if visit is None or not threshold:
        return True
    if visit.probability is None:
        return True
    return visit.probability >= threshold


class TimelineParser:
    """Parse a timeline export into segments, locations and years."""

    def __init__(
        self,
        country_lookup: Optional[CountryLookup] = None,
        probability_threshold: float = 0.0
    ):
        self.country_lookup = country_lookup
        self.probability_threshold = probability_threshold

    def parse_file(self, timeline_file: Path) -> ProcessedTimeline:
        """Load a JSON export from disk and parse it."""
        with open(timeline_file, 'rb') as f:
            data = orjson.loads(f.read())
        return self.parse(data)

    def parse(self, data: Any) -> ProcessedTimeline:
        """
        Parse an already-decoded export.

        Unknown root shapes produce an empty result; deciding whether that is
        an error is up to the caller.
        """
        adapter = get_adapter(data)
        if adapter.format == TimelineFormat.UNKNOWN:
            keys = ", ".join(map(str, list(data.keys())[:5])) if isinstance(data, dict) else type(data).__name__
            console.print(f"[yellow]Warning: Unrecognized timeline layout (got {keys})")

        segments: list[Segment] = []
        locations: list[LocationPoint] = []
        years: set[int] = set()
        skipped = 0

        for idx, raw in enumerate(adapter.extract(data)):
            try:
                segment = adapter.parse_segment(raw)
            except Exception as e:
                console.print(f"[yellow]Warning: Failed to parse segment {idx}: {e}")
                skipped += 1
                continue

            if segment is None:
                skipped += 1
                continue

            if segment.year is not None:
                years.add(segment.year)

            if not visit_passes_probability_threshold(segment.visit, self.probability_threshold):
                continue

            segment, segment_locations = self._extract_locations(segment)
            segments.append(segment)
            locations.extend(segment_locations)

        if skipped:
            console.print(f"[yellow]Skipped {skipped:,} unparseable segments")

        return ProcessedTimeline(
            segments=segments,
            locations=locations,
            years=sorted(years, reverse=True)
        )

    def _extract_locations(self, segment: Segment) -> tuple[Segment, list[LocationPoint]]:
        """
        Derive map locations from a segment.

        Returns the segment (an enriched copy carrying the resolved country
        when the visit location resolved to one) and its locations.

        Trail points carrying their own ``time`` use it; otherwise the time is
        the segment start plus the point's minute offset, or None when that
        cannot be computed.
        """
        locations = []

        visit = segment.visit
        if visit is not None:
            coordinate = parse_lat_lng(visit.lat_lng)
            if coordinate is not None:
                country = resolve_country(self.country_lookup, coordinate.lat, coordinate.lng)
                if country:
                    segment = segment.model_copy(update={'country': country})

                locations.append(LocationPoint(
                    lat=coordinate.lat,
                    lng=coordinate.lng,
                    start_time=segment.start_time,
                    end_time=segment.end_time,
                    name=visit.name,
                    probability=visit.probability,
                    place_id=visit.place_id,
                    country=country
                ))

        # Raw location trail
        for point in segment.timeline_path:
            point_time = point.time
            if point_time is None:
                point_time = offset_time(segment.start_time, point.offset_minutes)

            locations.append(LocationPoint(
                lat=point.point.lat,
                lng=point.point.lng,
                start_time=point_time,
                end_time=point_time,
                country=resolve_country(self.country_lookup, point.point.lat, point.point.lng)
            ))

        return segment, locations


def process_timeline_data(
    data: Any,
    country_lookup: Optional[CountryLookup] = None,
    probability_threshold: float = 0.0
) -> ProcessedTimeline:
    """Parse a decoded timeline export (see ``TimelineParser.parse``)."""
    return TimelineParser(country_lookup, probability_threshold).parse(data)
