"""
SQLAlchemy ORM models.

Tables
------
* ``truck_categories`` -- admin-managed reference data: one row per
  sellable truck category with its capacity and per-km base price.

Indexes
-------
* **B-Tree** on ``(truck_type, is_active)`` for the fare engine's lookup.
* Unique constraint on ``name``.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
    true,
)

from .database import Base
from truckfare.domain.enums import TruckType


class TruckCategoryModel(Base):
    __tablename__ = "truck_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)
    truck_type = Column(Enum(TruckType), nullable=False)
    capacity = Column(Float, nullable=False)  # tons
    base_price = Column(Float, nullable=False)  # currency / km
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_truck_categories_type_active", "truck_type", "is_active"),
    )
