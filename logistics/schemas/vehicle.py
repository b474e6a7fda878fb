"""Vehicle Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from logistics.domain.vehicle import VehicleCondition
from logistics.schemas.common import CamelModel


class VehicleCreate(CamelModel):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    color: str | None = None
    condition: VehicleCondition = VehicleCondition.RUNNING
    notes: str | None = None


class VehicleUpdate(CamelModel):
    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    color: str | None = None
    condition: VehicleCondition | None = None
    notes: str | None = None


class VehicleOut(CamelModel):
    id: str
    shipment_id: str
    make: str
    model: str
    year: int
    vin: str | None = None
    color: str | None = None
    condition: VehicleCondition
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
