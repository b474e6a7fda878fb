"""Vehicle service. Vehicles are always addressed through their shipment."""

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import NotFoundError
from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.domain.vehicle import Vehicle
from logistics.repositories.shipment import ShipmentRepository
from logistics.repositories.vehicle import VehicleRepository
from logistics.schemas.vehicle import VehicleCreate, VehicleUpdate


class VehicleService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._repo = VehicleRepository(session, identity)
        self._shipments = ShipmentRepository(session, identity)

    async def _require_shipment(self, shipment_id: str) -> None:
        if await self._shipments.get_by_id(shipment_id) is None:
            raise NotFoundError("Shipment", shipment_id)

    async def list_vehicles(self, shipment_id: str, pagination: PaginationParams):
        await self._require_shipment(shipment_id)
        return await self._repo.list_for_shipment(
            shipment_id,
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
        )

    async def get_vehicle(self, shipment_id: str, vehicle_id: str) -> Vehicle:
        vehicle = await self._repo.get_in_shipment(shipment_id, vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle", vehicle_id)
        return vehicle

    async def create_vehicle(self, shipment_id: str, data: VehicleCreate) -> Vehicle:
        fields = data.model_dump(exclude_none=True)
        fields["condition"] = data.condition.value
        vehicle = await self._repo.create_in_shipment(shipment_id, **fields)
        if vehicle is None:
            raise NotFoundError("Shipment", shipment_id)
        return vehicle

    async def update_vehicle(self, shipment_id: str, vehicle_id: str, data: VehicleUpdate) -> Vehicle:
        await self.get_vehicle(shipment_id, vehicle_id)
        fields = data.model_dump(exclude_unset=True)
        if data.condition is not None:
            fields["condition"] = data.condition.value
        updated = await self._repo.update(vehicle_id, **fields)
        if not updated:
            raise NotFoundError("Vehicle", vehicle_id)
        return updated

    async def delete_vehicle(self, shipment_id: str, vehicle_id: str) -> None:
        await self.get_vehicle(shipment_id, vehicle_id)
        if not await self._repo.delete(vehicle_id):
            raise NotFoundError("Vehicle", vehicle_id)
