"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from truckfare.domain.entities import FareRequest, Location
from truckfare.domain.enums import DistanceSource, TruckType, Urgency


# ── Shared ────────────────────────────────────────────────────────────


class LocationSchema(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=255)

    model_config = {"from_attributes": True}

    def to_domain(self) -> Location:
        return Location(self.latitude, self.longitude, self.address)


# ── Requests ──────────────────────────────────────────────────────────


class FareCalculateRequest(BaseModel):
    source: LocationSchema
    destination: LocationSchema
    truck_type: Optional[TruckType] = None
    truck_category_id: Optional[int] = Field(
        None, ge=1, description="Price with this category instead of the type default."
    )
    weight: Optional[float] = Field(None, ge=0, description="Cargo weight in tons.")
    urgency: Urgency = Urgency.NORMAL

    @model_validator(mode="after")
    def check_category_given(self):
        if self.truck_type is None and self.truck_category_id is None:
            raise ValueError("truck_type or truck_category_id is required")
        return self

    def to_domain(self) -> FareRequest:
        return FareRequest(
            source=self.source.to_domain(),
            destination=self.destination.to_domain(),
            truck_type=self.truck_type,
            weight=self.weight,
            urgency=self.urgency,
            truck_category_id=self.truck_category_id,
        )


class RouteRequest(BaseModel):
    source: LocationSchema
    destination: LocationSchema


class TruckCategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    truck_type: TruckType
    capacity: float = Field(..., gt=0, description="Capacity in tons.")
    base_price: float = Field(..., ge=0, description="Base price per km.")
    description: Optional[str] = None
    is_active: bool = True


class TruckCategoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    truck_type: Optional[TruckType] = None
    capacity: Optional[float] = Field(None, gt=0)
    base_price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


# ── Responses ─────────────────────────────────────────────────────────


class FareBreakdownResponse(BaseModel):
    distance_cost: float
    weight_cost: float
    urgency_cost: float

    model_config = {"from_attributes": True}


class FareQuoteResponse(BaseModel):
    distance_km: float
    duration_min: float
    base_fare: float
    weight_multiplier: float
    urgency_multiplier: float
    total_fare: float
    breakdown: FareBreakdownResponse
    truck_type: TruckType
    category_name: str
    distance_source: DistanceSource

    model_config = {"from_attributes": True}


class RouteDetailsResponse(BaseModel):
    distance_km: float
    duration_min: float
    geometry: dict[str, Any]
    waypoints: list[LocationSchema]
    source: DistanceSource

    model_config = {"from_attributes": True}


class TruckCategoryResponse(BaseModel):
    id: int
    name: str
    truck_type: TruckType
    capacity: float
    base_price: float
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TruckCategoryPage(BaseModel):
    items: list[TruckCategoryResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class TruckCategoryStats(BaseModel):
    total_categories: int
    active_categories: int
    inactive_categories: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
