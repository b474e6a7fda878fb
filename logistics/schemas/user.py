"""User Pydantic schemas. Password hashes never leave the service layer."""

from datetime import datetime

from pydantic import Field

from logistics.core.identity import Role
from logistics.schemas.common import CamelModel


class UserCreate(CamelModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    first_name: str | None = None
    last_name: str | None = None
    role: Role = Role.USER


class UserUpdate(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    role: Role | None = None
    active: bool | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)


class UserOut(CamelModel):
    id: str
    organization_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: Role
    active: bool
    created_at: datetime
    updated_at: datetime
