"""
Admin endpoints
===============

Truck categories are the reference data the fare engine prices against.

POST   /api/v1/admin/truck-categories                 -- create
GET    /api/v1/admin/truck-categories                 -- list / search (paged)
GET    /api/v1/admin/truck-categories/stats           -- active / inactive counts
GET    /api/v1/admin/truck-categories/{id}            -- fetch one
PATCH  /api/v1/admin/truck-categories/{id}            -- partial update
PATCH  /api/v1/admin/truck-categories/{id}/activate   -- re-enable pricing
PATCH  /api/v1/admin/truck-categories/{id}/deactivate -- hide from pricing
DELETE /api/v1/admin/truck-categories/{id}            -- remove
GET    /api/v1/admin/health                           -- simple health check
"""

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from truckfare.api.dependencies import get_db
from truckfare.api.middleware import limiter
from truckfare.api.schemas import (
    HealthResponse,
    TruckCategoryCreateRequest,
    TruckCategoryPage,
    TruckCategoryResponse,
    TruckCategoryStats,
    TruckCategoryUpdateRequest,
)
from truckfare.config import settings
from truckfare.infrastructure.models import TruckCategoryModel
from truckfare.infrastructure.repositories import TruckCategoryRepository

router = APIRouter(prefix="/admin", tags=["admin"])


async def _get_or_404(
    repo: TruckCategoryRepository, category_id: int
) -> TruckCategoryModel:
    category = await repo.get_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Truck category not found")
    return category


@router.post(
    "/truck-categories",
    status_code=201,
    response_model=TruckCategoryResponse,
    summary="Create a truck category",
)
@limiter.limit(settings.rate_limit)
async def create_truck_category(
    request: Request,
    body: TruckCategoryCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    if await repo.get_by_name(body.name):
        raise HTTPException(
            status_code=409, detail=f"Truck category {body.name!r} already exists"
        )
    return await repo.create(**body.model_dump())


@router.get(
    "/truck-categories",
    response_model=TruckCategoryPage,
    summary="List or search truck categories",
)
@limiter.limit(settings.rate_limit)
async def list_truck_categories(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    include_inactive: bool = False,
    q: Optional[str] = Query(None, min_length=1, description="Name / description filter"),
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    if q:
        items, total = await repo.search(q, page, limit)
    else:
        items, total = await repo.list_page(page, limit, include_inactive)
    return TruckCategoryPage(
        items=[TruckCategoryResponse.model_validate(c) for c in items],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get(
    "/truck-categories/stats",
    response_model=TruckCategoryStats,
    summary="Truck category counts",
)
@limiter.limit(settings.rate_limit)
async def truck_category_stats(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return TruckCategoryStats(**await TruckCategoryRepository(db).stats())


@router.get(
    "/truck-categories/{category_id}",
    response_model=TruckCategoryResponse,
    summary="Get a truck category",
)
@limiter.limit(settings.rate_limit)
async def get_truck_category(
    request: Request,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await _get_or_404(TruckCategoryRepository(db), category_id)


@router.patch(
    "/truck-categories/{category_id}",
    response_model=TruckCategoryResponse,
    summary="Update a truck category",
)
@limiter.limit(settings.rate_limit)
async def update_truck_category(
    request: Request,
    category_id: int,
    body: TruckCategoryUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    category = await _get_or_404(repo, category_id)

    # description is the only nullable column
    changes = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k == "description"
    }
    if changes.get("name") and changes["name"] != category.name:
        if await repo.get_by_name(changes["name"]):
            raise HTTPException(
                status_code=409,
                detail=f"Truck category {changes['name']!r} already exists",
            )
    return await repo.update(category, changes)


@router.patch(
    "/truck-categories/{category_id}/activate",
    response_model=TruckCategoryResponse,
    summary="Activate a truck category",
)
@limiter.limit(settings.rate_limit)
async def activate_truck_category(
    request: Request,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    return await repo.set_active(await _get_or_404(repo, category_id), True)


@router.patch(
    "/truck-categories/{category_id}/deactivate",
    response_model=TruckCategoryResponse,
    summary="Deactivate a truck category",
    description="Inactive categories are ignored by fare calculation.",
)
@limiter.limit(settings.rate_limit)
async def deactivate_truck_category(
    request: Request,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    return await repo.set_active(await _get_or_404(repo, category_id), False)


@router.delete(
    "/truck-categories/{category_id}",
    status_code=204,
    summary="Delete a truck category",
)
@limiter.limit(settings.rate_limit)
async def delete_truck_category(
    request: Request,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = TruckCategoryRepository(db)
    await repo.delete(await _get_or_404(repo, category_id))


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
