"""Auth request/response schemas."""

from pydantic import Field

from logistics.schemas.common import CamelModel
from logistics.schemas.organization import OrganizationOut
from logistics.schemas.user import UserOut

SLUG_PATTERN = r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$"


class RegisterRequest(CamelModel):
    """Onboard a new tenant together with its first admin."""

    organization_name: str = Field(min_length=1, max_length=255)
    organization_slug: str = Field(min_length=2, max_length=100, pattern=SLUG_PATTERN)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(CamelModel):
    email: str
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MeResponse(CamelModel):
    user: UserOut
    organization: OrganizationOut
