"""Carrier service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import ConflictError, NotFoundError
from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.domain.carrier import Carrier
from logistics.domain.shipment import ShipmentStatus
from logistics.repositories.carrier import CarrierRepository
from logistics.repositories.shipment import ShipmentRepository
from logistics.schemas.carrier import CarrierCreate, CarrierUpdate

logger = logging.getLogger(__name__)

# A carrier on one of these shipments is still moving cars and cannot be deleted
_ACTIVE_SHIPMENT_STATUSES = (ShipmentStatus.ASSIGNED.value, ShipmentStatus.IN_TRANSIT.value)


class CarrierService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._repo = CarrierRepository(session, identity)
        self._shipments = ShipmentRepository(session, identity)

    async def list_carriers(
        self,
        pagination: PaginationParams,
        search: str | None = None,
        active: bool | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"active": active},
            search=search,
        )

    async def get_carrier(self, carrier_id: str) -> Carrier:
        carrier = await self._repo.get_by_id(carrier_id)
        if not carrier:
            raise NotFoundError("Carrier", carrier_id)
        return carrier

    async def create_carrier(self, data: CarrierCreate) -> Carrier:
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_carrier(self, carrier_id: str, data: CarrierUpdate) -> Carrier:
        updated = await self._repo.update(carrier_id, **data.model_dump(exclude_unset=True))
        if not updated:
            raise NotFoundError("Carrier", carrier_id)
        return updated

    async def set_active(self, carrier_id: str, active: bool) -> Carrier:
        updated = await self._repo.set_active(carrier_id, active)
        if not updated:
            raise NotFoundError("Carrier", carrier_id)
        return updated

    async def delete_carrier(self, carrier_id: str) -> None:
        """Delete a carrier and detach it from this tenant's finished shipments.

        Refused while the carrier is on an assigned or in-transit shipment.
        """
        await self.get_carrier(carrier_id)
        busy = await self._shipments.count_referencing_carrier(carrier_id, _ACTIVE_SHIPMENT_STATUSES)
        if busy:
            raise ConflictError(
                f"Carrier is on {busy} active shipment(s); reassign or cancel them first"
            )
        detached = await self._shipments.detach_carrier(carrier_id)
        if detached:
            logger.info("Detached carrier %s from %d shipment(s)", carrier_id, detached)
        if not await self._repo.delete(carrier_id):
            raise NotFoundError("Carrier", carrier_id)
