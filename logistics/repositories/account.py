"""Unscoped account lookups for authentication and tenant onboarding.

This is the only repository that reads ``users`` and ``organizations``
without a :class:`TenantIdentity`: it runs before one exists. It is used by
the resolver, login and registration, never by request handlers directly.
"""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from logistics.core.config import settings
from logistics.core.identity import TenantIdentity
from logistics.domain.organization import Organization
from logistics.domain.user import User
from logistics.repositories.base import bounded

_ACCOUNT_CONFLICT = "An account with these details already exists"


class AccountRepository:
    def __init__(self, session: AsyncSession, *, timeout: float | None = None):
        self._session = session
        self._timeout = timeout if timeout is not None else settings.db_timeout_seconds

    async def _execute(self, statement):
        return await bounded(self._session.execute(statement), self._timeout, "Account lookup")

    async def get_user_with_organization(self, user_id: str) -> User | None:
        result = await self._execute(
            select(User)
            .options(joinedload(User.organization))
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self._execute(
            select(User)
            .options(joinedload(User.organization))
            .where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalars().first()

    async def email_taken(self, email: str) -> bool:
        result = await self._execute(
            select(User.id).where(func.lower(User.email) == email.strip().lower()).limit(1)
        )
        return result.first() is not None

    async def slug_taken(self, slug: str) -> bool:
        result = await self._execute(
            select(Organization.id).where(Organization.slug == slug).limit(1)
        )
        return result.first() is not None

    async def create_organization(self, *, name: str, slug: str) -> Organization:
        organization = Organization(name=name, slug=slug)
        self._session.add(organization)
        await self._flush()
        return organization

    async def create_user(self, **fields) -> User:
        user = User(**fields)
        self._session.add(user)
        await self._flush()
        return user

    async def _flush(self) -> None:
        await bounded(
            self._session.flush(),
            self._timeout,
            "Account flush",
            conflict_message=_ACCOUNT_CONFLICT,
        )


class OrganizationRepository:
    """The caller's own organization row, addressed only through the identity."""

    def __init__(
        self,
        session: AsyncSession,
        identity: TenantIdentity,
        *,
        timeout: float | None = None,
    ):
        if not isinstance(identity, TenantIdentity):
            raise TypeError("OrganizationRepository requires a TenantIdentity")
        self._session = session
        self._organization_id = identity.organization_id
        self._timeout = timeout if timeout is not None else settings.db_timeout_seconds

    async def _execute(self, statement):
        return await bounded(self._session.execute(statement), self._timeout, "Organization statement")

    async def get(self) -> Organization | None:
        result = await self._execute(
            select(Organization)
            .where(Organization.id == self._organization_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def update(self, **fields) -> Organization | None:
        values = {k: v for k, v in fields.items() if k in {"name", "active"} and v is not None}
        if values:
            await self._execute(
                update(Organization)
                .where(Organization.id == self._organization_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        return await self.get()
