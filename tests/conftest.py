"""Shared timeline fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest


def build_car_segment(distance: Any = 10000, start: str = "2024-03-01T08:00:00Z", end: str = "2024-03-01T09:00:00Z") -> dict[str, Any]:
    return {
        "startTime": start,
        "endTime": end,
        "activity": {
            "distanceMeters": distance,
            "topCandidate": {"type": "IN_PASSENGER_VEHICLE"},
        },
    }


def build_visit_segment(
    place_id: str | None = "place-1",
    lat_lng: str = "10.0°, 20.0°",
    probability: Any = 0.9,
    start: str = "2024-03-01T09:00:00Z",
    end: str = "2024-03-01T10:00:00Z",
    name: str | None = None,
) -> dict[str, Any]:
    place_location: dict[str, Any] = {"latLng": lat_lng}
    if name is not None:
        place_location["name"] = name
    candidate: dict[str, Any] = {"placeLocation": place_location}
    if place_id is not None:
        candidate["placeId"] = place_id
    visit: dict[str, Any] = {"topCandidate": candidate}
    if probability is not None:
        visit["probability"] = probability
    return {"startTime": start, "endTime": end, "visit": visit}


@pytest.fixture
def car_segment() -> Callable[..., dict[str, Any]]:
    """Builder for a car activity segment (10 km, one hour by default)."""
    return build_car_segment


@pytest.fixture
def visit_segment() -> Callable[..., dict[str, Any]]:
    """Builder for a visit segment at 10, 20."""
    return build_visit_segment


@pytest.fixture
def android_export() -> dict[str, Any]:
    return {
        "semanticSegments": [build_car_segment(), build_visit_segment()],
        "userLocationProfile": {},
    }


@pytest.fixture
def ios_export() -> list[dict[str, Any]]:
    return [
        {
            "startTime": "2024-03-01T08:00:00.000+00:00",
            "endTime": "2024-03-01T09:00:00.000+00:00",
            "activity": {
                "distanceMeters": "10000",
                "topCandidate": {"type": "in passenger vehicle"},
            },
        },
        {
            "startTime": "2024-03-01T09:00:00.000+00:00",
            "endTime": "2024-03-01T10:00:00.000+00:00",
            "visit": {
                "probability": "0.9",
                "topCandidate": {"placeID": "place-1", "placeLocation": "geo:10.0,20.0"},
            },
        },
    ]


@pytest.fixture
def square_geojson() -> dict[str, Any]:
    """Unit square named Testland plus a far-away square named Farland."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"ADMIN": "Testland"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                },
            },
            {
                "type": "Feature",
                "properties": {"name": "Farland"},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [[[[19, 9], [21, 9], [21, 11], [19, 11], [19, 9]]]],
                },
            },
        ],
    }
