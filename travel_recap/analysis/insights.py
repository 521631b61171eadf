"""
Highlights derived from statistics for the report: top places, top modes,
offset trees, primary emitter, time split and world coverage.
"""

import math
from typing import Optional

from .statistics import UNKNOWN_PLACE_NAME
from ..core.models import EcoStats, TimeStats, TransportAggregate, VisitAggregate

KG_CO2_PER_TREE_PER_YEAR = 25
WORLD_COUNTRY_COUNT = 195
MS_PER_HOUR = 1000 * 60 * 60

TRANSPORT_LABELS = {
    'IN_PASSENGER_VEHICLE': 'Car',
    'WALKING': 'Walking',
    'IN_TRAIN': 'Train',
    'IN_BUS': 'Bus',
    'FLYING': 'Flying',
    'CYCLING': 'Cycling',
    'MOTORCYCLING': 'Motorbike',
}


def top_places(visits: dict[str, VisitAggregate], limit: int = 4) -> list[VisitAggregate]:
    """Most visited named places."""
    named = [v for v in visits.values() if v.name != UNKNOWN_PLACE_NAME]
    return sorted(named, key=lambda v: v.count, reverse=True)[:limit]


def top_transport(
    transport: dict[str, TransportAggregate],
    limit: int = 6
) -> list[tuple[str, TransportAggregate]]:
    """Transport modes ordered by distance travelled."""
    ordered = sorted(transport.items(), key=lambda x: x[1].distance_meters, reverse=True)
    return ordered[:limit]


def transport_label(activity_type: str) -> str:
    return TRANSPORT_LABELS.get(activity_type, activity_type)


def trees_to_offset(total_co2_grams: float) -> int:
    """Trees needed for a year to absorb the emitted CO2."""
    total_kg = round(total_co2_grams / 1000)
    return math.ceil(total_kg / KG_CO2_PER_TREE_PER_YEAR)


def primary_emitter(eco: EcoStats) -> str:
    """Largest CO2 source as a readable label, "None" if nothing emitted."""
    top_type = None
    max_value = 0.0
    for activity_type, value in eco.breakdown.items():
        if value > max_value:
            max_value = value
            top_type = activity_type

    if top_type is None:
        return "None"
    return top_type.replace('IN_', '', 1).replace('_', ' ', 1)


def time_split(time: TimeStats) -> dict[str, float]:
    """Moving/stationary share (whole percent) and hours."""
    if time.total > 0:
        moving_pct = round(time.moving / time.total * 100)
        stationary_pct = round(time.stationary / time.total * 100)
    else:
        moving_pct = stationary_pct = 0

    return {
        'moving_pct': moving_pct,
        'stationary_pct': stationary_pct,
        'moving_hours': time.moving / MS_PER_HOUR,
        'stationary_hours': time.stationary / MS_PER_HOUR,
        'total_hours': time.total / MS_PER_HOUR,
    }


def world_coverage_percent(country_count: int) -> Optional[float]:
    """Playful "share of the world explored", capped at 100."""
    if country_count <= 0:
        return None
    return round(min(country_count / WORLD_COUNTRY_COUNT * 100 * 5, 100), 1)
