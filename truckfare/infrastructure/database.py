"""
Database access for truck categories.

The engine points at ``DATABASE_URL`` (PostgreSQL through ``asyncpg``).
Every fare quote reads one category row, so a modest pool covers the
quote endpoint and the admin surface together.  Sessions keep objects
usable after commit so routes can serialise what they just wrote.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from truckfare.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_size=10,
    max_overflow=5,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
