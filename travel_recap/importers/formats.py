"""
Export format detection and per-format segment adapters.

Two layouts are accepted:

- Android/Web: ``{"semanticSegments": [...], "userLocationProfile": ...}``
- iOS: a bare root array of segments

The layout is decided once from the root shape. Field-level differences
(``placeId`` vs ``placeID``, object vs ``geo:`` string place locations,
numeric strings, lowercase activity types) are reconciled by the shared
readers on ``SegmentAdapter`` so equivalent segment objects normalize the
same way whichever container they came in.
"""

from enum import Enum
from typing import Any, Optional

from .normalize import (
    canonical_activity_type,
    coerce_int,
    coerce_number,
    number_or_zero,
    parse_lat_lng,
    parse_timestamp,
    text_or_none,
)
from ..core.models import (
    Activity,
    PlaceCandidate,
    Segment,
    TimelinePathPoint,
    Visit,
)


class TimelineFormat(str, Enum):
    """Root layout of a timeline export."""

    SEMANTIC_SEGMENTS = "semantic_segments"  # Android / Web
    ROOT_ARRAY = "root_array"  # iOS
    UNKNOWN = "unknown"


def detect_format(data: Any) -> TimelineFormat:
    """Decide the export layout from the root JSON value."""
    if isinstance(data, list):
        return TimelineFormat.ROOT_ARRAY
    if isinstance(data, dict) and isinstance(data.get('semanticSegments'), list):
        return TimelineFormat.SEMANTIC_SEGMENTS
    return TimelineFormat.UNKNOWN


class SegmentAdapter:
    """Turns raw segment dicts of one export layout into ``Segment`` models."""

    format = TimelineFormat.UNKNOWN

    def extract(self, data: Any) -> list[Any]:
        """Return the raw segment list for this layout."""
        return []

    def parse_segment(self, raw: Any) -> Optional[Segment]:
        """
        Parse one raw segment.

        Returns None when the entry is not an object. Individual bad fields
        (coordinates, numbers, timestamps) degrade to None/0 instead.
        """
        if not isinstance(raw, dict):
            return None

        return Segment(
            start_time=parse_timestamp(raw.get('startTime')),
            end_time=parse_timestamp(raw.get('endTime')),
            visit=self._parse_visit(raw.get('visit')),
            activity=self._parse_activity(raw.get('activity')),
            timeline_path=self._parse_timeline_path(raw.get('timelinePath')),
        )

    def _parse_visit(self, visit_data: Any) -> Optional[Visit]:
        if not isinstance(visit_data, dict):
            return None

        top_candidate = visit_data.get('topCandidate')
        return Visit(
            probability=coerce_number(visit_data.get('probability')),
            top_candidate=self._parse_place_candidate(top_candidate)
                if isinstance(top_candidate, dict) else None,
        )

    @staticmethod
    def _parse_place_candidate(candidate: dict) -> PlaceCandidate:
        place_location = candidate.get('placeLocation')

        # Android has placeLocation.latLng (+ name), iOS has placeLocation as "geo:lat,lng"
        lat_lng = None
        name = None
        if isinstance(place_location, str):
            lat_lng = place_location
        elif isinstance(place_location, dict):
            lat_lng = place_location.get('latLng')
            name = text_or_none(place_location.get('name'))

        return PlaceCandidate(
            place_id=text_or_none(candidate.get('placeId') or candidate.get('placeID')),
            name=name,
            lat_lng=lat_lng if isinstance(lat_lng, str) else None,
        )

    @staticmethod
    def _parse_activity(activity_data: Any) -> Optional[Activity]:
        if not isinstance(activity_data, dict):
            return None

        top_candidate = activity_data.get('topCandidate')
        raw_type = top_candidate.get('type') if isinstance(top_candidate, dict) else None

        return Activity(
            distance_meters=number_or_zero(activity_data.get('distanceMeters')),
            activity_type=canonical_activity_type(raw_type),
        )

    @staticmethod
    def _parse_timeline_path(path_data: Any) -> list[TimelinePathPoint]:
        if not isinstance(path_data, list):
            return []

        points = []
        for point_data in path_data:
            if isinstance(point_data, str):
                point_data = {'point': point_data}
            if not isinstance(point_data, dict):
                continue

            coordinate = parse_lat_lng(point_data.get('point'))
            if coordinate is None:
                continue

            points.append(TimelinePathPoint(
                point=coordinate,
                offset_minutes=coerce_int(point_data.get('durationMinutesOffsetFromStartTime')),
                time=parse_timestamp(point_data.get('time')),
            ))
        return points


class SemanticSegmentsAdapter(SegmentAdapter):
    """Android / Web export: segments under ``semanticSegments``."""

    format = TimelineFormat.SEMANTIC_SEGMENTS

    def extract(self, data: Any) -> list[Any]:
        if not isinstance(data, dict):
            return []
        segments = data.get('semanticSegments')
        return segments if isinstance(segments, list) else []


class RootArrayAdapter(SegmentAdapter):
    """iOS export: the root value is the segment array."""

    format = TimelineFormat.ROOT_ARRAY

    def extract(self, data: Any) -> list[Any]:
        return data if isinstance(data, list) else []


_ADAPTERS = {
    TimelineFormat.SEMANTIC_SEGMENTS: SemanticSegmentsAdapter,
    TimelineFormat.ROOT_ARRAY: RootArrayAdapter,
    TimelineFormat.UNKNOWN: SegmentAdapter,
}


def get_adapter(data: Any) -> SegmentAdapter:
    """Pick the adapter matching the root shape of ``data``."""
    return _ADAPTERS[detect_format(data)]()


def get_segments_from_data(data: Any) -> list[Any]:
    """Raw segment list from either layout; empty for anything else."""
    return get_adapter(data).extract(data)
