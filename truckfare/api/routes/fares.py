"""
Fare endpoints
==============

POST /api/v1/fares/calculate -- quote a fare for a truck type (or category) and route
POST /api/v1/fares/route     -- road geometry for map display
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from truckfare.api.dependencies import get_fare_calculator
from truckfare.api.middleware import limiter
from truckfare.api.schemas import (
    ErrorResponse,
    FareCalculateRequest,
    FareQuoteResponse,
    RouteDetailsResponse,
    RouteRequest,
)
from truckfare.config import settings
from truckfare.domain.errors import CategoryNotFound, InvalidInput
from truckfare.domain.pricing import FareCalculator

router = APIRouter(prefix="/fares", tags=["fares"])


@router.post(
    "/calculate",
    response_model=FareQuoteResponse,
    summary="Calculate a fare quote",
    responses={400: {"model": ErrorResponse, "description": "No active category for the truck type or id"}},
)
@limiter.limit(settings.rate_limit)
async def calculate_fare(
    request: Request,
    body: FareCalculateRequest,
    calculator: FareCalculator = Depends(get_fare_calculator),
):
    try:
        quote = await calculator.calculate(body.to_domain())
    except CategoryNotFound as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return FareQuoteResponse.model_validate(quote)


@router.post(
    "/route",
    response_model=RouteDetailsResponse,
    summary="Get route details for map display",
    description=(
        "Road geometry from the routing provider, or a straight line with "
        "Haversine distance when the provider is absent or failing."
    ),
)
@limiter.limit(settings.rate_limit)
async def route_details(
    request: Request,
    body: RouteRequest,
    calculator: FareCalculator = Depends(get_fare_calculator),
):
    route = await calculator.route_details(
        body.source.to_domain(), body.destination.to_domain()
    )
    return RouteDetailsResponse.model_validate(route)
