"""SQLAlchemy ORM model for Shipments, the aggregate root.

``customer`` and ``carrier`` join on both the id and the organization_id, so
even a row that somehow points across tenants can never pull a foreign name
into a response.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import Date, ForeignKeyConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from logistics.db.base import Base
from logistics.domain.carrier import Carrier
from logistics.domain.customer import Customer
from logistics.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class ShipmentStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Shipment(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "shipments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id", "organization_id"],
            ["customers.id", "customers.organization_id"],
            name="fk_shipments_customer_same_org",
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["carrier_id", "organization_id"],
            ["carriers.id", "carriers.organization_id"],
            name="fk_shipments_carrier_same_org",
        ),
    )

    customer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    carrier_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ShipmentStatus.PENDING.value, nullable=False
    )

    pickup_address_line1: Mapped[str] = mapped_column(String(255), nullable=False)
    pickup_address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    pickup_city: Mapped[str] = mapped_column(String(100), nullable=False)
    pickup_state: Mapped[str] = mapped_column(String(50), nullable=False)
    pickup_zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    pickup_country: Mapped[Optional[str]] = mapped_column(String(100), default="USA")
    pickup_date_requested: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    pickup_date_actual: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    delivery_address_line1: Mapped[str] = mapped_column(String(255), nullable=False)
    delivery_address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    delivery_city: Mapped[str] = mapped_column(String(100), nullable=False)
    delivery_state: Mapped[str] = mapped_column(String(50), nullable=False)
    delivery_zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    delivery_country: Mapped[Optional[str]] = mapped_column(String(100), default="USA")
    delivery_date_estimated: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    delivery_date_actual: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    price_quoted: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    price_actual: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional[Customer]] = relationship(
        Customer,
        primaryjoin=lambda: (
            (Shipment.customer_id == Customer.id)
            & (Shipment.organization_id == Customer.organization_id)
        ),
        foreign_keys=lambda: [Shipment.customer_id, Shipment.organization_id],
        viewonly=True,
        lazy="joined",
    )
    carrier: Mapped[Optional[Carrier]] = relationship(
        Carrier,
        primaryjoin=lambda: (
            (Shipment.carrier_id == Carrier.id)
            & (Shipment.organization_id == Carrier.organization_id)
        ),
        foreign_keys=lambda: [Shipment.carrier_id, Shipment.organization_id],
        viewonly=True,
        lazy="joined",
    )

    @property
    def customer_name(self) -> Optional[str]:
        return self.customer.name if self.customer is not None else None

    @property
    def carrier_name(self) -> Optional[str]:
        return self.carrier.company_name if self.carrier is not None else None
