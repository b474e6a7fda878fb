"""Vehicle repository.

Vehicles have no organization_id of their own. Every statement is limited to
vehicles whose shipment belongs to the caller's organization, so a foreign
shipment's vehicles are as invisible as a foreign shipment.
"""

from typing import Any

from sqlalchemy import select

from logistics.domain.shipment import Shipment
from logistics.domain.vehicle import Vehicle
from logistics.repositories.base import TenantScopedRepository


class VehicleRepository(TenantScopedRepository[Vehicle]):
    model = Vehicle
    search_columns = ("make", "model", "vin")
    immutable_columns = ("shipment_id",)

    def _owned_shipments(self):
        return select(Shipment.id).where(
            Shipment.organization_id == self._identity.organization_id
        )

    def _tenant_predicate(self):
        return Vehicle.shipment_id.in_(self._owned_shipments())

    def _owner_fields(self) -> dict[str, Any]:
        return {}

    async def get_in_shipment(self, shipment_id: str, vehicle_id: str) -> Vehicle | None:
        vehicle = await self.get_by_id(vehicle_id)
        if vehicle is None or vehicle.shipment_id != shipment_id:
            return None
        return vehicle

    async def list_for_shipment(self, shipment_id: str, **kwargs: Any) -> tuple[list[Vehicle], int]:
        filters = dict(kwargs.pop("filters", None) or {})
        filters["shipment_id"] = shipment_id
        return await self.list(filters=filters, **kwargs)

    async def create_in_shipment(self, shipment_id: str, **fields: Any) -> Vehicle | None:
        """Insert a vehicle, or return None if the shipment is not the caller's."""
        owned = await self._execute(
            self._owned_shipments().where(Shipment.id == shipment_id)
        )
        if owned.first() is None:
            return None
        fields["shipment_id"] = shipment_id
        return await self.create(**fields)
