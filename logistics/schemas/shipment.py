"""Shipment Pydantic schemas.

Status is never accepted on create: a new shipment is ``assigned`` when it
names a carrier and ``pending`` otherwise.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from logistics.domain.shipment import ShipmentStatus
from logistics.schemas.common import CamelModel


class ShipmentCreate(CamelModel):
    customer_id: str
    carrier_id: str | None = None

    pickup_address_line1: str = Field(min_length=1)
    pickup_address_line2: str | None = None
    pickup_city: str = Field(min_length=1)
    pickup_state: str = Field(min_length=1)
    pickup_zip_code: str = Field(min_length=1)
    pickup_country: str | None = None
    pickup_date_requested: date | None = None

    delivery_address_line1: str = Field(min_length=1)
    delivery_address_line2: str | None = None
    delivery_city: str = Field(min_length=1)
    delivery_state: str = Field(min_length=1)
    delivery_zip_code: str = Field(min_length=1)
    delivery_country: str | None = None
    delivery_date_estimated: date | None = None

    price_quoted: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    notes: str | None = None


class ShipmentUpdate(CamelModel):
    customer_id: str | None = None
    carrier_id: str | None = None
    status: ShipmentStatus | None = None

    pickup_address_line1: str | None = None
    pickup_address_line2: str | None = None
    pickup_city: str | None = None
    pickup_state: str | None = None
    pickup_zip_code: str | None = None
    pickup_country: str | None = None
    pickup_date_requested: date | None = None
    pickup_date_actual: date | None = None

    delivery_address_line1: str | None = None
    delivery_address_line2: str | None = None
    delivery_city: str | None = None
    delivery_state: str | None = None
    delivery_zip_code: str | None = None
    delivery_country: str | None = None
    delivery_date_estimated: date | None = None
    delivery_date_actual: date | None = None

    price_quoted: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    price_actual: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    notes: str | None = None


class AssignCarrierRequest(CamelModel):
    carrier_id: str


class StatusChangeRequest(CamelModel):
    status: ShipmentStatus


class ShipmentOut(CamelModel):
    id: str
    organization_id: str
    customer_id: str
    customer_name: str | None = None
    carrier_id: str | None = None
    carrier_name: str | None = None
    status: ShipmentStatus

    pickup_address_line1: str
    pickup_address_line2: str | None = None
    pickup_city: str
    pickup_state: str
    pickup_zip_code: str
    pickup_country: str | None = None
    pickup_date_requested: date | None = None
    pickup_date_actual: date | None = None

    delivery_address_line1: str
    delivery_address_line2: str | None = None
    delivery_city: str
    delivery_state: str
    delivery_zip_code: str
    delivery_country: str | None = None
    delivery_date_estimated: date | None = None
    delivery_date_actual: date | None = None

    price_quoted: Decimal | None = None
    price_actual: Decimal | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ShipmentStats(CamelModel):
    total: int
    by_status: dict[str, int]
