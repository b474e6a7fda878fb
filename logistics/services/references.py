"""Cross-reference validation for linking writes.

Before a write stores ``customer_id`` or ``carrier_id`` on a shipment, the
referenced row is read back through the caller's own scoped repository, in
the same session and transaction as the write, and locked against deletion
until that transaction ends. A row that is missing and a row that belongs
to another organization are rejected the same way.

The composite foreign keys in the schema are the backstop if a code path
ever skips this check.
"""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import CrossTenantReferenceError
from logistics.core.identity import TenantIdentity
from logistics.repositories.base import TenantScopedRepository
from logistics.repositories.carrier import CarrierRepository
from logistics.repositories.customer import CustomerRepository
from logistics.repositories.shipment import ShipmentRepository

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    CUSTOMER = "Customer"
    CARRIER = "Carrier"
    SHIPMENT = "Shipment"


_REPOSITORIES: dict[EntityKind, type[TenantScopedRepository]] = {
    EntityKind.CUSTOMER: CustomerRepository,
    EntityKind.CARRIER: CarrierRepository,
    EntityKind.SHIPMENT: ShipmentRepository,
}


class CrossReferenceValidator:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._session = session
        self._identity = identity

    async def validate_same_tenant(self, kind: EntityKind, referenced_id: str):
        """Return the referenced row if the caller's organization owns it.

        Raises:
            CrossTenantReferenceError: The row is missing or owned by another
                organization (rendered as a plain 404).
        """
        repo = _REPOSITORIES[kind](self._session, self._identity)
        row = await repo.get_by_id(referenced_id, for_update=True)
        if row is None:
            logger.info(
                "Reference to %s '%s' rejected for organization %s",
                kind.value, referenced_id, self._identity.organization_id,
            )
            raise CrossTenantReferenceError(kind.value, referenced_id)
        return row
