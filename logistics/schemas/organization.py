"""Organization Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from logistics.schemas.common import CamelModel


class OrganizationUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class OrganizationOut(CamelModel):
    id: str
    name: str
    slug: str
    active: bool
    created_at: datetime
    updated_at: datetime
