"""SQLAlchemy ORM model for Vehicles. Scoped through their shipment."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from logistics.db.base import Base
from logistics.domain.mixins import IdMixin, TimestampMixin


class VehicleCondition(str, Enum):
    RUNNING = "running"
    NON_RUNNING = "non_running"
    DAMAGED = "damaged"


class Vehicle(Base, IdMixin, TimestampMixin):
    __tablename__ = "vehicles"

    shipment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    vin: Mapped[Optional[str]] = mapped_column(String(17), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    condition: Mapped[str] = mapped_column(
        String(20), default=VehicleCondition.RUNNING.value, nullable=False
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
