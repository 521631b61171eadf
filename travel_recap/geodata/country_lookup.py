"""
Offline country lookup using GeoJSON boundaries and point-in-polygon tests.

Features are scanned linearly in dataset order and the first match wins.
Every ring of a Polygon/MultiPolygon counts as "inside" on its own, so
interior rings (holes) are not subtracted.
"""

from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

Ring = tuple[tuple[float, float], ...]  # (lng, lat) pairs, GeoJSON order
Polygon = tuple[Ring, ...]

NAME_PROPERTIES = ('ADMIN', 'name', 'NAME')
_EPSILON = 1e-12


def point_in_ring(lat: float, lng: float, ring: Sequence[Sequence[float]]) -> bool:
    """
    Ray-casting containment test.

    ``ring`` is a sequence of [lng, lat] pairs. A crossing is counted when the
    point's latitude lies between an edge's endpoints (half-open) and the edge
    is to the right of the point at that latitude.
    """
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        if (yi > lat) != (yj > lat):
            dy = (yj - yi) or _EPSILON
            if lng < (xj - xi) * (lat - yi) / dy + xi:
                inside = not inside
        j = i
    return inside


class CountryFeature(BaseModel):
    """One country: display name plus its polygons."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    polygons: tuple[Polygon, ...] = ()

    def contains(self, lat: float, lng: float) -> bool:
        return any(
            point_in_ring(lat, lng, ring)
            for polygon in self.polygons
            for ring in polygon
        )


class CountryLookup:
    """Resolve a coordinate to a country name using pre-loaded boundaries."""

    def __init__(self, features: Iterable[CountryFeature]):
        self.features: tuple[CountryFeature, ...] = tuple(features)

    @classmethod
    def from_geojson(cls, geojson: Any) -> "CountryLookup":
        """
        Build a lookup from a GeoJSON FeatureCollection.

        Features without a Polygon/MultiPolygon geometry are skipped, as are
        rings that are not lists of numeric pairs.
        """
        raw_features = geojson.get('features') if isinstance(geojson, dict) else None
        if not isinstance(raw_features, list):
            return cls([])

        features = []
        for raw in raw_features:
            feature = _parse_feature(raw)
            if feature is not None:
                features.append(feature)
        return cls(features)

    def get_country(self, lat: float, lng: float) -> Optional[str]:
        """Return the name of the first feature containing the point, else None."""
        for feature in self.features:
            if feature.contains(lat, lng):
                return feature.name
        return None

    def __len__(self) -> int:
        return len(self.features)


def resolve_country(
    lookup: Optional[CountryLookup],
    lat: float,
    lng: float
) -> Optional[str]:
    """Country for a point, or None when no lookup is configured."""
    if lookup is None:
        return None
    return lookup.get_country(lat, lng)


def _parse_feature(raw: Any) -> Optional[CountryFeature]:
    if not isinstance(raw, dict):
        return None

    geometry = raw.get('geometry')
    if not isinstance(geometry, dict):
        return None

    geom_type = geometry.get('type')
    coordinates = geometry.get('coordinates')
    if not isinstance(coordinates, list):
        return None

    if geom_type == 'Polygon':
        polygons = [_parse_polygon(coordinates)]
    elif geom_type == 'MultiPolygon':
        polygons = [_parse_polygon(poly) for poly in coordinates if isinstance(poly, list)]
    else:
        return None

    polygons = tuple(p for p in polygons if p)
    if not polygons:
        return None

    properties = raw.get('properties') or {}
    name = None
    if isinstance(properties, dict):
        name = next((properties[key] for key in NAME_PROPERTIES if properties.get(key)), None)

    return CountryFeature(name=str(name) if name is not None else None, polygons=polygons)


def _parse_polygon(rings: list) -> Polygon:
    parsed = []
    for ring in rings:
        if not isinstance(ring, list):
            continue
        try:
            points = tuple((float(p[0]), float(p[1])) for p in ring)
        except (TypeError, ValueError, IndexError):
            continue
        if len(points) >= 3:
            parsed.append(points)
    return tuple(parsed)
