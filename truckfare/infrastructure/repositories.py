"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

``TruckCategoryRepository`` receives an ``AsyncSession`` (unit-of-work)
and serves both the fare engine's lookup and the admin CRUD routes.
``InMemoryCategoryStore`` satisfies the same lookup for callers without a
database.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import TruckCategoryModel
from truckfare.domain.entities import TruckCategory
from truckfare.domain.enums import TruckType

logger = logging.getLogger(__name__)


def _coerce_type(truck_type: TruckType | str) -> Optional[TruckType]:
    try:
        return TruckType(truck_type)
    except ValueError:
        return None


def to_entity(model: TruckCategoryModel) -> TruckCategory:
    return TruckCategory(
        id=model.id,
        name=model.name,
        truck_type=TruckType(model.truck_type),
        capacity=model.capacity,
        base_price=model.base_price,
        is_active=model.is_active,
        description=model.description,
        created_at=model.created_at,
    )


class TruckCategoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Fare engine lookup ────────────────────────────────────────────

    async def get_active_by_type(
        self, truck_type: TruckType | str
    ) -> Optional[TruckCategory]:
        """Oldest active category of *truck_type*, or ``None``."""
        coerced = _coerce_type(truck_type)
        if coerced is None:
            return None
        result = await self.session.execute(
            select(TruckCategoryModel)
            .where(
                TruckCategoryModel.truck_type == coerced,
                TruckCategoryModel.is_active.is_(True),
            )
            .order_by(TruckCategoryModel.id)
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return to_entity(model) if model else None

    async def get_active_by_id(self, category_id: int) -> Optional[TruckCategory]:
        result = await self.session.execute(
            select(TruckCategoryModel).where(
                TruckCategoryModel.id == category_id,
                TruckCategoryModel.is_active.is_(True),
            )
        )
        model = result.scalar_one_or_none()
        return to_entity(model) if model else None

    # ── Admin CRUD ────────────────────────────────────────────────────

    async def create(
        self,
        *,
        name: str,
        truck_type: TruckType,
        capacity: float,
        base_price: float,
        description: str | None = None,
        is_active: bool = True,
    ) -> TruckCategoryModel:
        category = TruckCategoryModel(
            name=name,
            truck_type=truck_type,
            capacity=capacity,
            base_price=base_price,
            description=description,
            is_active=is_active,
        )
        self.session.add(category)
        await self.session.flush()
        await self.session.refresh(category)
        logger.info("Created truck category %s (id=%d)", name, category.id)
        return category

    async def get_by_id(self, category_id: int) -> Optional[TruckCategoryModel]:
        return await self.session.get(TruckCategoryModel, category_id)

    async def get_by_name(self, name: str) -> Optional[TruckCategoryModel]:
        result = await self.session.execute(
            select(TruckCategoryModel).where(TruckCategoryModel.name == name)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self, page: int = 1, limit: int = 10, include_inactive: bool = False
    ) -> tuple[list[TruckCategoryModel], int]:
        conditions = [] if include_inactive else [TruckCategoryModel.is_active.is_(True)]
        return await self._page(conditions, page, limit)

    async def search(
        self, query: str, page: int = 1, limit: int = 10
    ) -> tuple[list[TruckCategoryModel], int]:
        pattern = f"%{query}%"
        conditions = [
            or_(
                TruckCategoryModel.name.ilike(pattern),
                TruckCategoryModel.description.ilike(pattern),
            )
        ]
        return await self._page(conditions, page, limit)

    async def update(
        self, category: TruckCategoryModel, changes: dict[str, Any]
    ) -> TruckCategoryModel:
        for key, value in changes.items():
            setattr(category, key, value)
        await self.session.flush()
        await self.session.refresh(category)
        logger.info(
            "Updated truck category id=%d fields=%s", category.id, sorted(changes)
        )
        return category

    async def set_active(
        self, category: TruckCategoryModel, active: bool
    ) -> TruckCategoryModel:
        return await self.update(category, {"is_active": active})

    async def delete(self, category: TruckCategoryModel) -> None:
        await self.session.delete(category)
        await self.session.flush()
        logger.info("Deleted truck category id=%d", category.id)

    async def stats(self) -> dict[str, int]:
        total = await self._count()
        active = await self._count(TruckCategoryModel.is_active.is_(True))
        return {
            "total_categories": total,
            "active_categories": active,
            "inactive_categories": total - active,
        }

    # ── Internals ─────────────────────────────────────────────────────

    async def _page(
        self, conditions: list, page: int, limit: int
    ) -> tuple[list[TruckCategoryModel], int]:
        result = await self.session.execute(
            select(TruckCategoryModel)
            .where(*conditions)
            .order_by(TruckCategoryModel.created_at.desc(), TruckCategoryModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), await self._count(*conditions)

    async def _count(self, *conditions) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TruckCategoryModel).where(*conditions)
        )
        return result.scalar() or 0


class InMemoryCategoryStore:
    """Category lookup over a fixed list, for tests and embedded use."""

    def __init__(self, categories: Iterable[TruckCategory] = ()):
        self._categories = list(categories)

    def add(self, category: TruckCategory) -> None:
        self._categories.append(category)

    async def get_active_by_type(
        self, truck_type: TruckType | str
    ) -> Optional[TruckCategory]:
        coerced = _coerce_type(truck_type)
        for category in self._categories:
            if category.truck_type == coerced and category.is_active:
                return category
        return None

    async def get_active_by_id(self, category_id: int) -> Optional[TruckCategory]:
        for category in self._categories:
            if category.id == category_id and category.is_active:
                return category
        return None
