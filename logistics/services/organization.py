"""The caller's own organization: view, rename, deactivate."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import ForbiddenError, NotFoundError
from logistics.core.identity import TenantIdentity
from logistics.domain.organization import Organization
from logistics.repositories.account import OrganizationRepository
from logistics.schemas.organization import OrganizationUpdate

logger = logging.getLogger(__name__)


class OrganizationService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._identity = identity
        self._repo = OrganizationRepository(session, identity)

    def _require_admin(self) -> None:
        if not self._identity.is_admin:
            raise ForbiddenError("Only administrators can change the organization")

    async def get_current(self) -> Organization:
        organization = await self._repo.get()
        if not organization:
            raise NotFoundError("Organization")
        return organization

    async def update_current(self, data: OrganizationUpdate) -> Organization:
        self._require_admin()
        organization = await self._repo.update(name=data.name)
        if not organization:
            raise NotFoundError("Organization")
        return organization

    async def deactivate_current(self) -> Organization:
        """Soft-deactivate the organization. Its members are locked out from the next request on."""
        self._require_admin()
        organization = await self._repo.update(active=False)
        if not organization:
            raise NotFoundError("Organization")
        logger.warning(
            "Organization %s deactivated by user %s",
            self._identity.organization_id, self._identity.user_id,
        )
        return organization
