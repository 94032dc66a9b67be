"""
Domain entities and value objects.

* ``Location`` validates its coordinates on construction, so every
  distance / fare computation downstream works on sane inputs.
* ``FareQuote`` is computed, never persisted by this service.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .enums import DistanceSource, TruckType, Urgency
from .errors import InvalidCoordinate


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    address: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.latitude) or not -90 <= self.latitude <= 90:
            raise InvalidCoordinate(f"Latitude out of range: {self.latitude}")
        if not math.isfinite(self.longitude) or not -180 <= self.longitude <= 180:
            raise InvalidCoordinate(f"Longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class DistanceEstimate:
    distance_km: float
    duration_min: float
    source: DistanceSource


@dataclass(frozen=True)
class RouteDetails:
    distance_km: float
    duration_min: float
    geometry: dict[str, Any]  # GeoJSON LineString
    waypoints: list[Location]
    source: DistanceSource


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class TruckCategory:
    id: Optional[int] = None
    name: str = ""
    truck_type: TruckType = TruckType.PICKUP
    capacity: float = 0.0  # tons
    base_price: float = 0.0  # currency per km
    is_active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FareRequest:
    source: Location
    destination: Location
    truck_type: Optional[TruckType | str] = None
    weight: Optional[float] = None  # tons
    urgency: Urgency = Urgency.NORMAL
    truck_category_id: Optional[int] = None  # wins over truck_type when set


@dataclass(frozen=True)
class FareBreakdown:
    distance_cost: float
    weight_cost: float
    urgency_cost: float


@dataclass(frozen=True)
class FareQuote:
    distance_km: float
    duration_min: float
    base_fare: float  # per-km base price of the category
    weight_multiplier: float
    urgency_multiplier: float
    total_fare: float
    breakdown: FareBreakdown
    truck_type: TruckType
    category_name: str
    distance_source: DistanceSource
