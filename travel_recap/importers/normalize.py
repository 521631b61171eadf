"""
Field-level normalization shared by both export formats.

Android/Web exports write coordinates as "12.9716°, 77.5946°", numbers as
JSON numbers and activity types as "IN_BUS". iOS exports write "geo:12.95,77.69",
numeric strings and "in bus". Everything here returns None (or a neutral
value) on bad input instead of raising.

Coordinates are also range-checked: a latitude beyond 90 or a longitude
beyond 180 degrees is treated as unparseable, so no location or country is
derived from it.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from ..core.models import Coordinate

UNKNOWN_ACTIVITY_TYPE = "UNKNOWN"

_GEO_PREFIX = re.compile(r"^geo:", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_FRACTION = re.compile(r"\.(\d+)")


def parse_lat_lng(value: Any) -> Optional[Coordinate]:
    """
    Parse a coordinate string.

    Supports:
    - Android/Web: "12.9716°, 77.5946°" or "12.9716, 77.5946"
    - iOS: "geo:12.952684,77.693002"

    Returns None for malformed or out-of-range values.
    """
    if not value or not isinstance(value, str):
        return None

    normalized = _GEO_PREFIX.sub("", value.strip()).replace("°", "").strip()
    parts = normalized.split(",")
    if len(parts) != 2:
        return None

    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None

    try:
        return Coordinate(lat=lat, lng=lng)
    except ValidationError:
        # Out of range
        return None


def canonical_activity_type(value: Any) -> str:
    """Normalize "in bus" / "IN_BUS" / "in_bus" to IN_BUS."""
    if not value or not isinstance(value, str):
        return UNKNOWN_ACTIVITY_TYPE
    token = _WHITESPACE.sub("_", value.strip().upper())
    return token or UNKNOWN_ACTIVITY_TYPE


def coerce_number(value: Any) -> Optional[float]:
    """Coerce a JSON number or numeric string to float."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def number_or_zero(value: Any) -> float:
    number = coerce_number(value)
    return number if number is not None else 0.0


def coerce_int(value: Any) -> int:
    """Integer offsets such as durationMinutesOffsetFromStartTime ("12" or 12)."""
    number = coerce_number(value)
    return int(number) if number is not None else 0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp of any precision.

    Naive timestamps are taken as UTC so that durations can always be computed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat wants at most microsecond precision
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None
