"""
Fare Calculation Engine
=======================

Formula
-------
distance_cost = Distance x Base_Price_Per_KM
weight_cost   = distance_cost x (Weight_Multiplier - 1)
urgency_cost  = distance_cost x (Urgency_Multiplier - 1)
Total_Fare    = distance_cost + weight_cost + urgency_cost

* **Weight_Multiplier**: tiered on cargo tons -- <=1: 1.0, <=3: 1.2,
  <=5: 1.5, <=10: 2.0, above: 2.5.
* **Urgency_Multiplier**: NORMAL 1.0, URGENT 1.3, EMERGENCY 1.8.

Money is rounded to 2 dp with ROUND_HALF_UP.  Breakdown components are
rounded independently and the total is rounded from the unrounded sum,
so the parts add up to the total within 0.02.  Distance and duration are
passed through unrounded.

Distance comes from the routing provider when one is configured; any
``MappingProviderError`` is logged and replaced by a Haversine estimate.
The quote records which path was taken in ``distance_source``.

Complexity: O(1) per quote plus one category read and at most one
provider call.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol

from .distance import DEFAULT_MINUTES_PER_KM, fallback_estimate
from .entities import (
    DistanceEstimate,
    FareBreakdown,
    FareQuote,
    FareRequest,
    Location,
    RouteDetails,
    TruckCategory,
)
from .enums import (
    HEAVY_WEIGHT_MULTIPLIER,
    URGENCY_MULTIPLIERS,
    WEIGHT_TIERS,
    DistanceSource,
    TruckType,
    Urgency,
)
from .errors import CategoryNotFound, InvalidInput, MappingProviderError

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


# ── Collaborator protocols ────────────────────────────────────────────


class CategoryStore(Protocol):
    async def get_active_by_type(
        self, truck_type: TruckType | str
    ) -> Optional[TruckCategory]: ...

    async def get_active_by_id(
        self, category_id: int
    ) -> Optional[TruckCategory]: ...


class DistanceProvider(Protocol):
    async def estimate(
        self, origin: Location, destination: Location
    ) -> DistanceEstimate: ...

    async def route(
        self, origin: Location, destination: Location
    ) -> RouteDetails: ...


# ── Pure helpers ──────────────────────────────────────────────────────


def round_money(value: float) -> float:
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def weight_multiplier(weight: Optional[float]) -> float:
    if weight is None:
        return 1.0
    if not math.isfinite(weight) or weight < 0:
        raise InvalidInput(f"Weight must be a non-negative number, got {weight}")
    for upper, multiplier in WEIGHT_TIERS:
        if weight <= upper:
            return multiplier
    return HEAVY_WEIGHT_MULTIPLIER


def urgency_multiplier(urgency: Urgency | str = Urgency.NORMAL) -> float:
    try:
        return URGENCY_MULTIPLIERS[Urgency(urgency)]
    except ValueError:
        raise InvalidInput(f"Unknown urgency: {urgency}") from None


def straight_line_route(
    origin: Location,
    destination: Location,
    minutes_per_km: float = DEFAULT_MINUTES_PER_KM,
) -> RouteDetails:
    """Two-point route used when the provider cannot draw a real one."""
    estimate = fallback_estimate(origin, destination, minutes_per_km)
    return RouteDetails(
        distance_km=estimate.distance_km,
        duration_min=estimate.duration_min,
        geometry={
            "type": "LineString",
            "coordinates": [
                [origin.longitude, origin.latitude],
                [destination.longitude, destination.latitude],
            ],
        },
        waypoints=[
            Location(origin.latitude, origin.longitude),
            Location(destination.latitude, destination.longitude),
        ],
        source=DistanceSource.HAVERSINE,
    )


def _same_type(a: TruckType | str, b: TruckType | str) -> bool:
    return getattr(a, "value", a) == getattr(b, "value", b)


def _usable(estimate: DistanceEstimate) -> bool:
    return all(
        math.isfinite(v) and v >= 0
        for v in (estimate.distance_km, estimate.duration_min)
    )


# ── Engine facade ─────────────────────────────────────────────────────


class FareCalculator:
    """High-level API used by the fare routes.

    Both collaborators are injected: ``categories`` is any
    :class:`CategoryStore` (DB repository or in-memory), ``provider`` is an
    optional :class:`DistanceProvider`.
    """

    def __init__(
        self,
        categories: CategoryStore,
        provider: Optional[DistanceProvider] = None,
        minutes_per_km: float = DEFAULT_MINUTES_PER_KM,
    ):
        self.categories = categories
        self.provider = provider
        self.minutes_per_km = minutes_per_km

    async def calculate(self, request: FareRequest) -> FareQuote:
        w_mult = weight_multiplier(request.weight)
        u_mult = urgency_multiplier(request.urgency)

        category = await self.resolve_category(request)

        estimate = await self.estimate_distance(request.source, request.destination)

        distance_cost = estimate.distance_km * category.base_price
        weight_cost = distance_cost * (w_mult - 1)
        urgency_cost = distance_cost * (u_mult - 1)
        total = distance_cost + weight_cost + urgency_cost

        quote = FareQuote(
            distance_km=estimate.distance_km,
            duration_min=estimate.duration_min,
            base_fare=category.base_price,
            weight_multiplier=w_mult,
            urgency_multiplier=u_mult,
            total_fare=round_money(total),
            breakdown=FareBreakdown(
                distance_cost=round_money(distance_cost),
                weight_cost=round_money(weight_cost),
                urgency_cost=round_money(urgency_cost),
            ),
            truck_type=category.truck_type,
            category_name=category.name,
            distance_source=estimate.source,
        )
        logger.debug(
            "Fare quote %s: %.2f km (%s) -> %.2f",
            category.name,
            quote.distance_km,
            quote.distance_source.value,
            quote.total_fare,
        )
        return quote

    async def resolve_category(self, request: FareRequest) -> TruckCategory:
        """Active category for the request.

        An explicit ``truck_category_id`` selects the category directly; a
        ``truck_type`` given alongside it must match.  Otherwise the oldest
        active category of ``truck_type`` is used.
        """
        if request.truck_category_id is not None:
            category = await self.categories.get_active_by_id(request.truck_category_id)
            if category is None or not category.is_active:
                raise CategoryNotFound(
                    request.truck_type, category_id=request.truck_category_id
                )
            if request.truck_type is not None and not _same_type(
                category.truck_type, request.truck_type
            ):
                raise InvalidInput(
                    f"Truck category {category.id} is "
                    f"{getattr(category.truck_type, 'value', category.truck_type)}, "
                    f"not {getattr(request.truck_type, 'value', request.truck_type)}"
                )
            return category

        if request.truck_type is None:
            raise InvalidInput("Either truck_type or truck_category_id is required")
        category = await self.categories.get_active_by_type(request.truck_type)
        if category is None or not category.is_active:
            raise CategoryNotFound(request.truck_type)
        return category

    async def estimate_distance(
        self, origin: Location, destination: Location
    ) -> DistanceEstimate:
        """Provider estimate if configured and healthy, else Haversine."""
        if self.provider is not None:
            try:
                estimate = await self.provider.estimate(origin, destination)
            except MappingProviderError as exc:
                logger.warning("Routing provider failed, using Haversine: %s", exc)
            else:
                if _usable(estimate):
                    return estimate
                logger.warning(
                    "Routing provider returned unusable estimate %r, using Haversine",
                    estimate,
                )
        return fallback_estimate(origin, destination, self.minutes_per_km)

    async def route_details(
        self, origin: Location, destination: Location
    ) -> RouteDetails:
        if self.provider is not None:
            try:
                return await self.provider.route(origin, destination)
            except MappingProviderError as exc:
                logger.warning(
                    "Routing provider failed, using straight line: %s", exc
                )
        return straight_line_route(origin, destination, self.minutes_per_km)
