"""
OSRM routing client.

Asks an OSRM server for the road route between two points.  Every
failure mode (transport error, timeout, HTTP status, non-``Ok`` code,
malformed body, non-finite numbers) is reported as
``MappingProviderError``; callers decide how to fall back.

One ``httpx.AsyncClient`` is held for the client's lifetime so
connections are pooled; close it with :meth:`aclose` or use the client
as an async context manager.

One bounded retry with jittered back-off is made by default
(``max_retries``).  OSRM expects ``lon,lat`` ordering in the path.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Any, Optional

import httpx

from truckfare.domain.entities import DistanceEstimate, Location, RouteDetails
from truckfare.domain.enums import DistanceSource
from truckfare.domain.errors import InvalidCoordinate, MappingProviderError

logger = logging.getLogger(__name__)


class OsrmRoutingClient:
    def __init__(
        self,
        base_url: str,
        profile: str = "driving",
        timeout_seconds: float = 5.0,
        max_retries: int = 1,
        retry_backoff_seconds: float = 0.25,
        user_agent: str = "truckfare/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.max_retries = max(0, max_retries)
        self.retry_backoff = retry_backoff_seconds
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            transport=transport,
            headers={"User-Agent": user_agent},
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def estimate(
        self, origin: Location, destination: Location
    ) -> DistanceEstimate:
        route = await self._fetch_route(
            origin, destination, {"overview": "false"}
        )
        return DistanceEstimate(
            distance_km=route["distance"] / 1000,
            duration_min=route["duration"] / 60,
            source=DistanceSource.PROVIDER,
        )

    async def route(self, origin: Location, destination: Location) -> RouteDetails:
        route = await self._fetch_route(
            origin, destination, {"overview": "full", "geometries": "geojson"}
        )
        geometry = route.get("geometry")
        if not isinstance(geometry, dict) or not geometry.get("coordinates"):
            raise MappingProviderError("OSRM: route has no GeoJSON geometry")
        try:
            waypoints = [Location(lat, lng) for lng, lat in geometry["coordinates"]]
        except (TypeError, ValueError, InvalidCoordinate) as exc:
            raise MappingProviderError(f"OSRM: bad geometry ({exc})") from exc
        return RouteDetails(
            distance_km=route["distance"] / 1000,
            duration_min=route["duration"] / 60,
            geometry=geometry,
            waypoints=waypoints,
            source=DistanceSource.PROVIDER,
        )

    # ── Internals ─────────────────────────────────────────────────────

    async def _fetch_route(
        self, origin: Location, destination: Location, params: dict[str, str]
    ) -> dict[str, Any]:
        attempts = self.max_retries + 1
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._request(origin, destination, params)
            except MappingProviderError as exc:
                if attempt >= attempts:
                    raise
                delay = self.retry_backoff * (1 + random.random())
                logger.info(
                    "OSRM attempt %d/%d failed (%s); retrying in %.2fs",
                    attempt,
                    attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)

    async def _request(
        self, origin: Location, destination: Location, params: dict[str, str]
    ) -> dict[str, Any]:
        path = (
            f"{origin.longitude:.6f},{origin.latitude:.6f};"
            f"{destination.longitude:.6f},{destination.latitude:.6f}"
        )
        url = f"{self.base_url}/route/v1/{self.profile}/{path}"
        try:
            r = await self._client.get(url, params=params)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPError as exc:
            raise MappingProviderError(f"OSRM request failed: {exc}") from exc
        except ValueError as exc:
            raise MappingProviderError(f"OSRM returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict) or data.get("code") != "Ok":
            code = data.get("code") if isinstance(data, dict) else None
            raise MappingProviderError(f"OSRM error code: {code}")
        routes = data.get("routes")
        if not isinstance(routes, list) or not routes:
            raise MappingProviderError("OSRM: no routes")

        route = routes[0]
        if not isinstance(route, dict):
            raise MappingProviderError("OSRM: malformed route (not an object)")
        try:
            distance = float(route["distance"])
            duration = float(route["duration"])
        except (KeyError, TypeError, ValueError) as exc:
            raise MappingProviderError(f"OSRM: malformed route ({exc})") from exc
        if not (math.isfinite(distance) and math.isfinite(duration)):
            raise MappingProviderError("OSRM: non-finite distance or duration")
        if distance < 0 or duration < 0:
            raise MappingProviderError("OSRM: negative distance or duration")
        return {**route, "distance": distance, "duration": duration}
