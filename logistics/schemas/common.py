"""Shared Pydantic schema base with camelCase aliases, plus the health payload."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """All API schemas inherit from this to auto-generate camelCase aliases.

    Unknown input keys are ignored, which is how a forged ``organizationId``
    in a request body disappears before it reaches a service.
    """

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True,
        "extra": "ignore",
    }


class HealthResponse(BaseModel):
    """Health-check response returned by /health."""
    status: str = "ok"
    app: str
    env: str
    schema_version: int | None = None
