"""Request-scoped dependencies: category session, routing client, calculator."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from truckfare.config import settings
from truckfare.domain.pricing import FareCalculator
from truckfare.infrastructure.database import async_session_factory
from truckfare.infrastructure.repositories import TruckCategoryRepository
from truckfare.infrastructure.routing_client import OsrmRoutingClient


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Session for one request's category reads and admin writes.

    Admin changes are committed when the handler returns and rolled back
    if it raises, so a failed PATCH never leaves a half-edited category.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_routing_client(request: Request) -> Optional[OsrmRoutingClient]:
    """The app-wide OSRM client created in the lifespan, if any."""
    return getattr(request.app.state, "routing_client", None)


def get_fare_calculator(
    db: AsyncSession = Depends(get_db),
    routing: Optional[OsrmRoutingClient] = Depends(get_routing_client),
) -> FareCalculator:
    return FareCalculator(
        TruckCategoryRepository(db),
        routing,
        minutes_per_km=settings.fallback_minutes_per_km,
    )
