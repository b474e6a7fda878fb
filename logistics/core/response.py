"""Response envelopes: `{ data: ... }` for one item, `{ data: [...], meta: {...} }` for pages."""

from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from logistics.core.pagination import PageMeta, PaginationParams

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    data: T

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


class ListResponse(BaseModel, Generic[T]):
    data: list[T]
    meta: PageMeta

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


def paginated(items: Sequence, total: int, pagination: PaginationParams) -> dict:
    """Body of a :class:`ListResponse` for one page of a scoped listing."""
    return {"data": list(items), "meta": pagination.meta(total)}
