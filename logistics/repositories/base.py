"""Generic async repository with pagination and mandatory tenant isolation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Generic, TypeVar

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.config import settings
from logistics.core.exceptions import ConflictError, TransientStoreError
from logistics.core.identity import TenantIdentity
from logistics.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
T = TypeVar("T")

# Columns no caller may write through create/update
_PROTECTED_COLUMNS = frozenset({"id", "organization_id", "created_at"})

_CONSTRAINT_MESSAGE = "The write was rejected by a data constraint"


async def bounded(
    awaitable: Awaitable[T],
    timeout: float,
    what: str,
    *,
    conflict_message: str = _CONSTRAINT_MESSAGE,
) -> T:
    """Await one database call under *timeout*.

    A timeout becomes :class:`TransientStoreError` and a constraint violation
    becomes :class:`ConflictError`; neither is retried.
    """
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError as exc:
        logger.error("%s exceeded %.1fs", what, timeout)
        raise TransientStoreError() from exc
    except IntegrityError as exc:
        raise ConflictError(conflict_message) from exc


class TenantScopedRepository(Generic[ModelT]):
    """Generic CRUD repository. Every statement is filtered by organization_id.

    The identity is bound once, at construction, and must be a
    :class:`TenantIdentity`; there is no way to build a repository from a
    bare organization id taken off a request. A row owned by another tenant
    behaves exactly like a row that does not exist.

    Subclasses set ``model`` and optionally ``search_columns`` (matched
    case-insensitively by ``list(search=...)``).
    """

    model: type[ModelT]
    search_columns: tuple[str, ...] = ()
    immutable_columns: tuple[str, ...] = ()

    def __init__(
        self,
        session: AsyncSession,
        identity: TenantIdentity,
        *,
        timeout: float | None = None,
    ):
        if not isinstance(identity, TenantIdentity):
            raise TypeError(
                f"{type(self).__name__} requires a TenantIdentity, got {type(identity).__name__}"
            )
        self._session = session
        self._identity = identity
        self._timeout = timeout if timeout is not None else settings.db_timeout_seconds

    @property
    def identity(self) -> TenantIdentity:
        return self._identity

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _tenant_predicate(self):
        return self.model.organization_id == self._identity.organization_id

    def _owner_fields(self) -> dict[str, Any]:
        return {"organization_id": self._identity.organization_id}

    def _base_query(self) -> Select:
        """Return a SELECT filtered by the caller's organization."""
        return select(self.model).where(self._tenant_predicate())

    async def _execute(self, statement, **kwargs: Any):
        """Run one statement under the repository's timeout."""
        return await bounded(
            self._session.execute(statement, **kwargs),
            self._timeout,
            f"{self.model.__name__} statement",
        )

    async def _flush(self) -> None:
        await bounded(self._session.flush(), self._timeout, f"{self.model.__name__} flush")

    def _writable(self, fields: dict[str, Any]) -> dict[str, Any]:
        columns = self.model.__table__.columns.keys()
        return {
            k: v for k, v in fields.items()
            if k in columns and k not in _PROTECTED_COLUMNS
        }

    def _updatable(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {
            k: v for k, v in self._writable(fields).items()
            if v is not None and k not in self.immutable_columns
        }

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str, *, for_update: bool = False) -> ModelT | None:
        """Fetch one row owned by the caller, or None.

        With ``for_update`` the row is locked ``FOR KEY SHARE`` until the
        transaction ends, so it cannot be deleted or re-keyed underneath a
        write that references it. Engines without row locks ignore it.
        """
        q = self._base_query().where(self.model.id == entity_id)
        if for_update:
            q = q.with_for_update(read=True, key_share=True, of=self.model)
        result = await self._execute(q, execution_options={"populate_existing": True})
        return result.unique().scalars().first()

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order: str = "desc",
        filters: dict[str, Any] | None = None,
        search: str | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination and optional column filters."""
        q = self._base_query()
        columns = self.model.__table__.columns

        # Simple equality filters; the tenant column is never caller-controlled
        if filters:
            for col_name, value in filters.items():
                if col_name == "organization_id":
                    continue
                if value is not None and col_name in columns:
                    q = q.where(columns[col_name] == value)

        if search and self.search_columns:
            pattern = f"%{search.strip()}%"
            q = q.where(or_(*(columns[c].ilike(pattern) for c in self.search_columns)))

        count_q = select(func.count()).select_from(q.order_by(None).subquery())
        total = (await self._execute(count_q)).scalar_one()

        # Only real columns are sortable; id keeps pages stable
        col = columns.get(order_by)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        q = q.order_by(self.model.id.asc()).offset(offset).limit(limit)

        items = (await self._execute(q)).unique().scalars().all()
        return list(items), total

    async def count_by(self, column: str) -> dict[Any, int]:
        """Row counts grouped by *column*, within the caller's organization."""
        col = self.model.__table__.columns[column]
        result = await self._execute(
            select(col, func.count()).where(self._tenant_predicate()).group_by(col)
        )
        return {value: count for value, count in result.all()}

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(**self._writable(kwargs), **self._owner_fields())
        self._session.add(instance)
        await self._flush()  # populate defaults, surface constraint errors here
        created = await self.get_by_id(instance.id)
        return created  # type: ignore[return-value]

    async def update(self, entity_id: str, **kwargs: Any) -> ModelT | None:
        values = self._updatable(kwargs)
        if values:
            # updated_at is refreshed by the column's onupdate
            result = await self._execute(
                update(self.model)
                .where(self.model.id == entity_id)
                .where(self._tenant_predicate())
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
        return await self.get_by_id(entity_id)

    async def delete(self, entity_id: str) -> bool:
        """Hard delete. Children go with it through ON DELETE CASCADE."""
        result = await self._execute(
            delete(self.model)
            .where(self.model.id == entity_id)
            .where(self._tenant_predicate())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
