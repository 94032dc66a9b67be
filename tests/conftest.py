"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models carry no PostgreSQL-only
column types, so the real metadata is created directly.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from truckfare.domain.entities import DistanceEstimate, Location, TruckCategory
from truckfare.domain.enums import DistanceSource, TruckType
from truckfare.domain.errors import MappingProviderError
from truckfare.infrastructure.database import Base
from truckfare.infrastructure.models import TruckCategoryModel
from truckfare.infrastructure.repositories import InMemoryCategoryStore


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# ── Sample data ───────────────────────────────────────────────────────

GULSHAN_1 = Location(23.7803, 90.4168, "Gulshan-1")
MIRPUR_10 = Location(23.8260, 90.3800, "Mirpur-10")


def sample_categories() -> list[TruckCategory]:
    return [
        TruckCategory(id=1, name="Mini Truck", truck_type=TruckType.MINI_TRUCK,
                      capacity=1.0, base_price=30.0),
        TruckCategory(id=2, name="Pickup", truck_type=TruckType.PICKUP,
                      capacity=2.0, base_price=40.0),
        TruckCategory(id=3, name="Lorry", truck_type=TruckType.LORRY,
                      capacity=5.0, base_price=70.0),
        TruckCategory(id=4, name="Retired Truck", truck_type=TruckType.TRUCK,
                      capacity=10.0, base_price=90.0, is_active=False),
    ]


# ── Test doubles ──────────────────────────────────────────────────────


class StubProvider:
    """Distance provider returning a fixed road distance."""

    def __init__(self, distance_km: float, duration_min: float):
        self.distance_km = distance_km
        self.duration_min = duration_min
        self.calls = 0

    async def estimate(self, origin, destination):
        self.calls += 1
        return DistanceEstimate(
            self.distance_km, self.duration_min, DistanceSource.PROVIDER
        )

    async def route(self, origin, destination):
        raise MappingProviderError("route not stubbed")


class FailingProvider:
    def __init__(self):
        self.calls = 0

    async def estimate(self, origin, destination):
        self.calls += 1
        raise MappingProviderError("connection refused")

    async def route(self, origin, destination):
        self.calls += 1
        raise MappingProviderError("connection refused")


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def category_store() -> InMemoryCategoryStore:
    return InMemoryCategoryStore(sample_categories())


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by SQLite, no routing provider, seeded categories."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        for c in sample_categories():
            session.add(
                TruckCategoryModel(
                    name=c.name,
                    truck_type=c.truck_type,
                    capacity=c.capacity,
                    base_price=c.base_price,
                    is_active=c.is_active,
                )
            )
        await session.commit()

    async def _test_db():
        async with TestSessionFactory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from truckfare.api.app import create_app
    from truckfare.api.dependencies import get_db, get_routing_client
    from truckfare.api.middleware import limiter

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_routing_client] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
