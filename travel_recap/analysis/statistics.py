"""
Travel statistics over a list of timeline segments.

Provides distance, visit and country tallies, and per-transport-mode
breakdowns. Each call starts from empty aggregates; callers that want
per-year results slice the segments first.
"""

from typing import Iterable, Optional

from ..core.models import (
    LocationPoint,
    Segment,
    TimelineStats,
    TransportAggregate,
    VisitAggregate,
)
from ..geodata.country_lookup import CountryLookup, resolve_country
from ..importers.normalize import parse_lat_lng

UNKNOWN_PLACE_NAME = "Unknown Place"
UNKNOWN_PLACE_KEY = "unknown"


def calculate_stats(
    segments: Iterable[Segment],
    country_lookup: Optional[CountryLookup] = None
) -> TimelineStats:
    """
    Calculate distance, visit and transport statistics.

    Args:
        segments: Segments as produced by the parser, or any slice of them
        country_lookup: Used only for visits whose country was not resolved
            during parsing

    Returns:
        TimelineStats with fresh aggregates
    """
    stats = TimelineStats()

    for segment in segments:
        activity = segment.activity
        if activity is not None:
            stats.total_distance_meters += activity.distance_meters

            transport = stats.transport.get(activity.activity_type)
            if transport is None:
                transport = stats.transport[activity.activity_type] = TransportAggregate()
            transport.count += 1
            transport.distance_meters += activity.distance_meters

            # Missing timestamps contribute no duration
            duration = segment.duration_ms
            if duration is not None:
                transport.duration_ms += duration

        visit = segment.visit
        if visit is not None:
            stats.total_visits += 1

            country = segment.country
            if not country:
                coordinate = parse_lat_lng(visit.lat_lng)
                if coordinate is not None:
                    country = resolve_country(country_lookup, coordinate.lat, coordinate.lng)

            if country:
                stats.countries.add(country)

            key = visit.place_id or UNKNOWN_PLACE_KEY
            aggregate = stats.visits.get(key)
            if aggregate is None:
                aggregate = stats.visits[key] = VisitAggregate(count=0)

            # Latest sighting wins for descriptive fields
            aggregate.count += 1
            aggregate.name = visit.name or UNKNOWN_PLACE_NAME
            aggregate.lat_lng = visit.lat_lng
            aggregate.country = country or None

    return stats


def filter_segments_by_year(segments: Iterable[Segment], year: Optional[int]) -> list[Segment]:
    """Segments starting in ``year``; all segments when year is None."""
    if year is None:
        return list(segments)
    return [s for s in segments if s.year == year]


def filter_locations_by_year(
    locations: Iterable[LocationPoint],
    year: Optional[int]
) -> list[LocationPoint]:
    """Locations starting in ``year``; all locations when year is None."""
    if year is None:
        return list(locations)
    return [loc for loc in locations if loc.start_time is not None and loc.start_time.year == year]
