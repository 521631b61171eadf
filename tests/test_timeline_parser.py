"""Timeline parser tests."""

from __future__ import annotations

from datetime import datetime, timezone

import orjson

from travel_recap.core.models import Visit
from travel_recap.geodata.country_lookup import CountryLookup
from travel_recap.importers.timeline_parser import (
    TimelineParser,
    offset_time,
    process_timeline_data,
    visit_passes_probability_threshold,
)


def test_probability_threshold_filters_low_confidence_visits(visit_segment) -> None:
    data = {
        "semanticSegments": [
            visit_segment(place_id="low", probability=0.3),
            visit_segment(place_id="high", probability=0.9),
            visit_segment(place_id="unknown-prob", probability=None),
        ]
    }

    timeline = process_timeline_data(data, probability_threshold=0.5)

    kept = [s.visit.place_id for s in timeline.segments]
    assert kept == ["high", "unknown-prob"]
    assert len(timeline.locations) == 2


def test_zero_threshold_keeps_everything(visit_segment) -> None:
    data = [visit_segment(probability=0.01), visit_segment(probability="garbage")]
    assert len(process_timeline_data(data).segments) == 2


def test_visit_passes_probability_threshold() -> None:
    assert visit_passes_probability_threshold(None, 0.9)
    assert visit_passes_probability_threshold(Visit(probability=None), 0.9)
    assert visit_passes_probability_threshold(Visit(probability=0.5), 0.5)
    assert not visit_passes_probability_threshold(Visit(probability=0.49), 0.5)


def test_years_are_distinct_and_newest_first(car_segment) -> None:
    data = [
        car_segment(start="2022-05-01T00:00:00Z", end="2022-05-01T01:00:00Z"),
        car_segment(start="2024-05-01T00:00:00Z", end="2024-05-01T01:00:00Z"),
        car_segment(start="2022-06-01T00:00:00Z", end="2022-06-01T01:00:00Z"),
        car_segment(start="", end=""),
    ]

    timeline = process_timeline_data(data)

    assert timeline.years == [2024, 2022]
    assert len(timeline.segments) == 4


def test_years_include_filtered_visits(visit_segment) -> None:
    data = [visit_segment(probability=0.1, start="2021-01-01T00:00:00Z", end="2021-01-01T01:00:00Z")]
    timeline = process_timeline_data(data, probability_threshold=0.5)
    assert timeline.segments == []
    assert timeline.years == [2021]


def test_locations_from_visits_and_paths(visit_segment) -> None:
    data = [
        visit_segment(name="Cafe"),
        {
            "startTime": "2024-03-01T10:00:00Z",
            "endTime": "2024-03-01T11:00:00Z",
            "timelinePath": [{"point": "1.5°, 2.5°", "durationMinutesOffsetFromStartTime": "30"}],
        },
    ]

    timeline = process_timeline_data(data)

    visit_location, path_location = timeline.locations
    assert (visit_location.lat, visit_location.lng) == (10.0, 20.0)
    assert visit_location.name == "Cafe"
    assert visit_location.place_id == "place-1"
    assert visit_location.probability == 0.9
    assert (path_location.lat, path_location.lng) == (1.5, 2.5)
    assert path_location.start_time == datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)


def test_visit_with_bad_coordinates_yields_no_location(visit_segment) -> None:
    timeline = process_timeline_data([visit_segment(lat_lng="not a coordinate")])
    assert len(timeline.segments) == 1
    assert timeline.locations == []


def test_country_enrichment_does_not_touch_input(square_geojson, visit_segment) -> None:
    lookup = CountryLookup.from_geojson(square_geojson)
    raw = visit_segment(lat_lng="0.5°, 0.5°")
    data = [raw]
    before = orjson.dumps(data)

    timeline = TimelineParser(lookup).parse(data)

    assert timeline.segments[0].country == "Testland"
    assert timeline.locations[0].country == "Testland"
    assert orjson.dumps(data) == before


def test_unparseable_entries_are_skipped(capsys, car_segment) -> None:
    timeline = process_timeline_data([1, "two", car_segment()])
    assert len(timeline.segments) == 1
    assert "Skipped 2" in capsys.readouterr().err


def test_unknown_layout_returns_empty_result(car_segment) -> None:
    timeline = process_timeline_data({"timelineObjects": [car_segment()]})
    assert timeline.segments == []
    assert timeline.locations == []
    assert timeline.years == []


def test_parse_file(tmp_path, android_export) -> None:
    path = tmp_path / "Timeline.json"
    path.write_bytes(orjson.dumps(android_export))

    timeline = TimelineParser().parse_file(path)

    assert len(timeline.segments) == 2
    assert timeline.years == [2024]


def test_huge_trail_offset_does_not_abort_ingestion(visit_segment) -> None:
    data = [
        visit_segment(),
        {
            "startTime": "2024-01-01T00:00:00Z",
            "timelinePath": [{"point": "1,2", "durationMinutesOffsetFromStartTime": "9999999999"}],
        },
    ]

    timeline = process_timeline_data(data)

    assert len(timeline.segments) == 2
    trail_location = timeline.locations[-1]
    assert (trail_location.lat, trail_location.lng) == (1.0, 2.0)
    assert trail_location.start_time is None


def test_offset_time() -> None:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert offset_time(start, 90) == datetime(2024, 1, 1, 1, 30, tzinfo=timezone.utc)
    assert offset_time(None, 90) is None
    assert offset_time(start, 10**12) is None


def test_trail_point_time_wins_over_offset() -> None:
    data = [
        {
            "startTime": "2024-03-01T10:00:00Z",
            "timelinePath": [
                {"point": "1,2", "durationMinutesOffsetFromStartTime": "30", "time": "2024-03-01T12:00:00Z"},
            ],
        }
    ]

    location = process_timeline_data(data).locations[0]

    assert location.start_time == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_root_shape_does_not_change_result(car_segment, visit_segment) -> None:
    segments = [
        car_segment(),
        visit_segment(place_id="low", probability=0.3),
        visit_segment(place_id="high", probability=0.9, name="Cafe"),
        {
            "startTime": "2023-06-01T10:00:00Z",
            "timelinePath": [{"point": "geo:1,2", "durationMinutesOffsetFromStartTime": 5}],
        },
    ]

    wrapped = process_timeline_data({"semanticSegments": segments}, probability_threshold=0.5)
    bare = process_timeline_data(segments, probability_threshold=0.5)

    assert wrapped == bare
    assert wrapped.years == [2024, 2023]
    assert len(wrapped.segments) == 3
