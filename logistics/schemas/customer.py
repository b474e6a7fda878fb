"""Customer Pydantic schemas (request DTOs and response models)."""

from datetime import datetime

from pydantic import Field

from logistics.schemas.common import CamelModel


class CustomerCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class CustomerUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class CustomerOut(CamelModel):
    id: str
    organization_id: str
    name: str
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    created_at: datetime
    updated_at: datetime
