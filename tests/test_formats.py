"""Export layout detection and segment adapter tests."""

from __future__ import annotations

from travel_recap.importers.formats import (
    RootArrayAdapter,
    SemanticSegmentsAdapter,
    TimelineFormat,
    detect_format,
    get_adapter,
    get_segments_from_data,
)


def test_detect_format_by_root_shape() -> None:
    assert detect_format({"semanticSegments": []}) is TimelineFormat.SEMANTIC_SEGMENTS
    assert detect_format([]) is TimelineFormat.ROOT_ARRAY
    assert detect_format({"timelineObjects": []}) is TimelineFormat.UNKNOWN
    assert detect_format({"semanticSegments": "nope"}) is TimelineFormat.UNKNOWN
    assert detect_format("text") is TimelineFormat.UNKNOWN


def test_get_adapter_picks_layout_class() -> None:
    assert isinstance(get_adapter({"semanticSegments": []}), SemanticSegmentsAdapter)
    assert isinstance(get_adapter([]), RootArrayAdapter)


def test_get_segments_from_data_both_layouts(android_export, ios_export) -> None:
    assert len(get_segments_from_data(android_export)) == 2
    assert len(get_segments_from_data(ios_export)) == 2
    assert get_segments_from_data({"other": 1}) == []
    assert get_segments_from_data(None) == []


def test_equivalent_segments_normalize_identically(android_export, ios_export) -> None:
    android = get_adapter(android_export)
    ios = get_adapter(ios_export)

    android_segments = [android.parse_segment(raw) for raw in android.extract(android_export)]
    ios_segments = [ios.parse_segment(raw) for raw in ios.extract(ios_export)]

    assert android_segments[0].activity == ios_segments[0].activity
    assert android_segments[0].duration_ms == ios_segments[0].duration_ms == 3_600_000
    assert android_segments[1].visit.place_id == ios_segments[1].visit.place_id == "place-1"
    assert android_segments[1].visit.probability == ios_segments[1].visit.probability == 0.9


def test_parse_segment_tolerates_bad_fields() -> None:
    adapter = RootArrayAdapter()

    assert adapter.parse_segment("not a segment") is None

    segment = adapter.parse_segment(
        {
            "startTime": "garbage",
            "visit": {"probability": "high", "topCandidate": {"placeLocation": {"latLng": "x"}}},
            "activity": {"distanceMeters": "far"},
        }
    )
    assert segment is not None
    assert segment.start_time is None
    assert segment.duration_ms is None
    assert segment.visit.probability is None
    assert segment.activity.distance_meters == 0.0
    assert segment.activity.activity_type == "UNKNOWN"


def test_parse_place_location_object_name() -> None:
    segment = SemanticSegmentsAdapter().parse_segment(
        {"visit": {"topCandidate": {"placeId": "p", "placeLocation": {"latLng": "1°, 2°", "name": "Cafe"}}}}
    )
    assert segment.visit.name == "Cafe"
    assert segment.visit.lat_lng == "1°, 2°"


def test_parse_timeline_path_points() -> None:
    segment = SemanticSegmentsAdapter().parse_segment(
        {
            "startTime": "2024-01-01T00:00:00Z",
            "timelinePath": [
                {"point": "1.0°, 2.0°", "durationMinutesOffsetFromStartTime": "5"},
                {"point": "geo:3,4", "time": "2024-01-01T01:00:00Z"},
                {"point": "broken"},
                "5.0°, 6.0°",
                7,
            ],
        }
    )
    path = segment.timeline_path
    assert [(p.point.lat, p.point.lng) for p in path] == [(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]
    assert path[0].offset_minutes == 5
    assert path[1].time is not None
