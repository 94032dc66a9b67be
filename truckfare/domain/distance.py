"""
Distance calculation using the Haversine formula.

Used directly when no routing provider is configured and as the fallback
whenever the provider fails.  Road distances are longer than great-circle
distances, so fallback quotes under-estimate slightly.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math

from .entities import DistanceEstimate, Location
from .enums import DistanceSource

EARTH_RADIUS_KM = 6_371.0
DEFAULT_MINUTES_PER_KM = 2.0  # ~30 km/h average in city traffic


def haversine_km(a: Location, b: Location) -> float:
    """Return the great-circle distance in **km** between two locations."""
    lat1_r, lat2_r = math.radians(a.latitude), math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    h = min(1.0, h)  # float drift near antipodes
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def fallback_estimate(
    a: Location, b: Location, minutes_per_km: float = DEFAULT_MINUTES_PER_KM
) -> DistanceEstimate:
    """Haversine distance with a flat-speed duration estimate."""
    distance = haversine_km(a, b)
    return DistanceEstimate(
        distance_km=distance,
        duration_min=distance * minutes_per_km,
        source=DistanceSource.HAVERSINE,
    )
