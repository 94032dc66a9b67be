"""Domain enumerations and pricing multiplier tables."""

import enum


class TruckType(str, enum.Enum):
    MINI_TRUCK = "MINI_TRUCK"
    PICKUP = "PICKUP"
    LORRY = "LORRY"
    TRUCK = "TRUCK"


class Urgency(str, enum.Enum):
    NORMAL = "NORMAL"
    URGENT = "URGENT"
    EMERGENCY = "EMERGENCY"


class DistanceSource(str, enum.Enum):
    """Which path produced a distance estimate."""

    PROVIDER = "PROVIDER"
    HAVERSINE = "HAVERSINE"


URGENCY_MULTIPLIERS: dict[Urgency, float] = {
    Urgency.NORMAL: 1.0,
    Urgency.URGENT: 1.3,
    Urgency.EMERGENCY: 1.8,
}

# (upper bound in tons, multiplier) -- checked in order, inclusive
WEIGHT_TIERS: tuple[tuple[float, float], ...] = (
    (1.0, 1.0),
    (3.0, 1.2),
    (5.0, 1.5),
    (10.0, 2.0),
)
HEAVY_WEIGHT_MULTIPLIER = 2.5
