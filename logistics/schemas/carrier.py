"""Carrier Pydantic schemas (request DTOs and response models)."""

from datetime import date, datetime

from pydantic import Field

from logistics.schemas.common import CamelModel


class CarrierCreate(CamelModel):
    company_name: str = Field(min_length=1, max_length=255)
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    mc_number: str | None = None
    dot_number: str | None = None
    insurance_provider: str | None = None
    insurance_policy_number: str | None = None
    insurance_expiry: date | None = None
    active: bool = True


class CarrierUpdate(CamelModel):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    mc_number: str | None = None
    dot_number: str | None = None
    insurance_provider: str | None = None
    insurance_policy_number: str | None = None
    insurance_expiry: date | None = None
    active: bool | None = None


class CarrierOut(CamelModel):
    id: str
    organization_id: str
    company_name: str
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    mc_number: str | None = None
    dot_number: str | None = None
    insurance_provider: str | None = None
    insurance_policy_number: str | None = None
    insurance_expiry: date | None = None
    active: bool
    created_at: datetime
    updated_at: datetime
