"""Tenant identity carried through every data-access call of a request."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True, slots=True)
class TenantIdentity:
    """Immutable identity of the authenticated caller.

    Only :class:`logistics.services.auth.TenantContextResolver` builds these,
    from the user's database row. It is deliberately not a Pydantic model so
    FastAPI can never bind one from a request body or query string.
    """

    organization_id: str
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
