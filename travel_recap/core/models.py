"""
Pydantic models for timeline data structures and derived statistics.

Field names are snake_case in Python and serialize with camelCase aliases
(``model_dump(by_alias=True)``), which is the shape rendering code and the
JSON export consume.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(CamelModel):
    """Represents a geographic coordinate (latitude, longitude)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    def __str__(self) -> str:
        return f"{self.lat}°, {self.lng}°"


class PlaceCandidate(CamelModel):
    """The top candidate place of a visit."""

    place_id: Optional[str] = None
    name: Optional[str] = None
    lat_lng: Optional[str] = None  # raw coordinate string, either "lat°, lng°" or "geo:lat,lng"


class Visit(CamelModel):
    """A stationary period at one place."""

    probability: Optional[float] = None
    top_candidate: Optional[PlaceCandidate] = None

    @property
    def place_id(self) -> Optional[str]:
        """Get the place ID from top candidate if available."""
        return self.top_candidate.place_id if self.top_candidate else None

    @property
    def lat_lng(self) -> Optional[str]:
        return self.top_candidate.lat_lng if self.top_candidate else None

    @property
    def name(self) -> Optional[str]:
        return self.top_candidate.name if self.top_candidate else None


class Activity(CamelModel):
    """A movement period."""

    distance_meters: float = 0.0
    activity_type: str = "UNKNOWN"  # canonical token, e.g. IN_BUS

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000


class TimelinePathPoint(CamelModel):
    """A single raw trail point inside a segment."""

    point: Coordinate
    offset_minutes: int = 0
    time: Optional[datetime] = None


class Segment(CamelModel):
    """
    One semantic unit of the timeline export, normalized from either format.

    ``country`` is only set on the enriched copies emitted by the parser so
    statistics can reuse the lookup made during extraction.
    """

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    visit: Optional[Visit] = None
    activity: Optional[Activity] = None
    timeline_path: list[TimelinePathPoint] = Field(default_factory=list)
    country: Optional[str] = None

    @property
    def duration_ms(self) -> Optional[float]:
        """Milliseconds between start and end, None if either is missing."""
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() * 1000

    @property
    def year(self) -> Optional[int]:
        return self.start_time.year if self.start_time else None


class LocationPoint(CamelModel):
    """A flattened, map-ready location derived from a visit or a trail point."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    lat: float
    lng: float
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    name: Optional[str] = None
    probability: Optional[float] = None
    place_id: Optional[str] = None
    country: Optional[str] = None


class ProcessedTimeline(CamelModel):
    """Output of the segment extractor."""

    segments: list[Segment] = Field(default_factory=list)
    locations: list[LocationPoint] = Field(default_factory=list)
    years: list[int] = Field(default_factory=list)


class VisitAggregate(CamelModel):
    """Per-place visit tally."""

    name: str = "Unknown Place"
    count: int = 0
    lat_lng: Optional[str] = None
    country: Optional[str] = None


class TransportAggregate(CamelModel):
    """Per-activity-type totals."""

    count: int = 0
    distance_meters: float = 0.0
    duration_ms: float = 0.0


class TimelineStats(CamelModel):
    """Aggregate travel statistics over a segment list."""

    total_distance_meters: float = 0.0
    total_visits: int = 0
    countries: set[str] = Field(default_factory=set)
    transport: dict[str, TransportAggregate] = Field(default_factory=dict)
    visits: dict[str, VisitAggregate] = Field(default_factory=dict)

    @field_serializer('countries')
    def serialize_countries(self, countries: set[str]) -> list[str]:
        return sorted(countries)

    @property
    def total_distance_km(self) -> float:
        return self.total_distance_meters / 1000


class EcoStats(CamelModel):
    """Estimated CO2 emissions, in grams, and distance per type in km."""

    total_co2: float = 0.0
    breakdown: dict[str, float] = Field(default_factory=dict)
    distance_by_type: dict[str, float] = Field(default_factory=dict)


class TimeStats(CamelModel):
    """Moving vs. stationary time in milliseconds."""

    moving: float = 0.0
    stationary: float = 0.0
    total: float = 0.0


class RecordStats(CamelModel):
    """Longest single segments, in meters."""

    longest_drive: float = 0.0
    longest_walk: float = 0.0
    max_velocity: float = 0.0


class AdvancedStats(CamelModel):
    """Environmental, time and record metrics."""

    eco: EcoStats = Field(default_factory=EcoStats)
    time: TimeStats = Field(default_factory=TimeStats)
    records: RecordStats = Field(default_factory=RecordStats)
