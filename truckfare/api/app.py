"""
Truck Fare API app factory.

The lifespan owns the process-wide resources: one pooled OSRM client
(only when ``ROUTING_BASE_URL`` is set), stored on ``app.state`` and
closed on shutdown, and the category database engine, disposed last.
Fare and truck-category routers are mounted under ``/api/v1``, and
slowapi throttles them.  OpenAPI docs live at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from truckfare.api.middleware import limiter
from truckfare.api.routes import admin, fares
from truckfare.config import settings
from truckfare.infrastructure.database import engine
from truckfare.infrastructure.routing_client import OsrmRoutingClient

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def build_routing_client() -> Optional[OsrmRoutingClient]:
    """OSRM client from settings, or ``None`` when no provider is configured."""
    if not settings.routing_base_url:
        return None
    return OsrmRoutingClient(
        settings.routing_base_url,
        profile=settings.routing_profile,
        timeout_seconds=settings.routing_timeout_seconds,
        max_retries=settings.routing_max_retries,
        retry_backoff_seconds=settings.routing_retry_backoff_seconds,
        user_agent=settings.routing_user_agent,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    routing_client = build_routing_client()
    app.state.routing_client = routing_client
    if routing_client is not None:
        logger.info("Routing provider: %s", routing_client.base_url)
    else:
        logger.info("No routing provider configured; using Haversine estimates")
    try:
        yield
    finally:
        if routing_client is not None:
            await routing_client.aclose()
        app.state.routing_client = None
        await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Truck Fare API",
        description=(
            "Quotes truck-transport fares from distance, truck category, "
            "cargo weight and urgency.  Road distances come from an optional "
            "OSRM provider with a Haversine fallback."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(fares.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
