"""Paging and sorting query parameters shared by every list endpoint."""

import math
from typing import Literal

from fastapi import Query
from pydantic import BaseModel

MAX_PAGE_SIZE = 200


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20&sort=created_at&order=desc`.

    ``sort`` has to look like a column name. Repositories still ignore names
    that are not columns of the listed table, so it never reaches SQL as text.
    """

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE, description="Rows per page"),
        sort: str = Query(default="created_at", pattern=r"^[a-z_]{1,64}$", description="Column to sort by"),
        order: Literal["asc", "desc"] = Query(default="desc", description="Sort direction"),
    ):
        self.page = page
        self.limit = limit
        self.sort = sort
        self.order = order

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PageMeta:
        """Describe the page just served out of *total* matching rows."""
        return PageMeta(
            total=total,
            page=self.page,
            limit=self.limit,
            pages=math.ceil(total / self.limit),
        )
