"""
Advanced metrics: estimated CO2, moving vs. stationary time, records.
"""

from typing import Iterable, Mapping

from ..core.models import AdvancedStats, Segment

# Approximate grams of CO2 per km. Types not listed emit nothing.
EMISSION_FACTORS: Mapping[str, float] = {
    'IN_PASSENGER_VEHICLE': 150,
    'IN_VEHICLE': 150,
    'IN_TAXI': 150,
    'FLYING': 115,
    'IN_BUS': 80,
    'IN_TRAIN': 40,
    'IN_SUBWAY': 40,
    'WALKING': 0,
    'RUNNING': 0,
    'CYCLING': 0,
    'MOTORCYCLING': 100,
}

DRIVING_TYPES = frozenset({'IN_PASSENGER_VEHICLE', 'IN_VEHICLE'})
ON_FOOT_TYPES = frozenset({'WALKING', 'RUNNING'})


def calculate_advanced_stats(
    segments: Iterable[Segment],
    emission_factors: Mapping[str, float] = EMISSION_FACTORS
) -> AdvancedStats:
    """
    Calculate eco impact, time distribution and record breakers.

    Args:
        segments: Segment list (or a year slice of it)
        emission_factors: Grams of CO2 per km keyed by canonical activity type

    Returns:
        AdvancedStats; times in milliseconds, CO2 in grams, records in meters
    """
    stats = AdvancedStats()
    eco, time, records = stats.eco, stats.time, stats.records

    for segment in segments:
        duration = segment.duration_ms or 0.0
        time.total += duration

        activity = segment.activity
        if activity is not None:
            time.moving += duration

            activity_type = activity.activity_type
            distance_km = activity.distance_km
            eco.distance_by_type[activity_type] = eco.distance_by_type.get(activity_type, 0.0) + distance_km

            co2 = distance_km * emission_factors.get(activity_type, 0)
            eco.total_co2 += co2
            eco.breakdown[activity_type] = eco.breakdown.get(activity_type, 0.0) + co2

            if activity_type in DRIVING_TYPES:
                records.longest_drive = max(records.longest_drive, activity.distance_meters)
            elif activity_type in ON_FOOT_TYPES:
                records.longest_walk = max(records.longest_walk, activity.distance_meters)

        elif segment.visit is not None:
            time.stationary += duration

    return stats
