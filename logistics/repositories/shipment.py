"""Shipment repository.

Reads eager-load the customer and carrier through joins that also match on
organization_id (see :class:`logistics.domain.shipment.Shipment`).
"""

from sqlalchemy import func, select, update

from logistics.domain.shipment import Shipment
from logistics.repositories.base import TenantScopedRepository


class ShipmentRepository(TenantScopedRepository[Shipment]):
    model = Shipment
    search_columns = ("pickup_city", "delivery_city", "notes")

    async def count_referencing_carrier(self, carrier_id: str, statuses: tuple[str, ...]) -> int:
        result = await self._execute(
            select(func.count())
            .select_from(Shipment)
            .where(self._tenant_predicate())
            .where(Shipment.carrier_id == carrier_id)
            .where(Shipment.status.in_(statuses))
        )
        return result.scalar_one()

    async def detach_carrier(self, carrier_id: str) -> int:
        """Clear carrier_id on every shipment of this tenant that points at *carrier_id*."""
        result = await self._execute(
            update(Shipment)
            .where(self._tenant_predicate())
            .where(Shipment.carrier_id == carrier_id)
            .values(carrier_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
