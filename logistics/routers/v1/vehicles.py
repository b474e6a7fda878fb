"""Vehicle router, nested under the owning shipment."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.response import DataResponse, ListResponse, paginated
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from logistics.services.vehicle import VehicleService

router = APIRouter(prefix="/shipments/{shipment_id}/vehicles", tags=["Vehicles"])


@router.get("", response_model=ListResponse[VehicleOut])
async def list_vehicles(
    shipment_id: str,
    pagination: PaginationParams = Depends(),
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    items, total = await VehicleService(session, identity).list_vehicles(shipment_id, pagination)
    return paginated([VehicleOut.model_validate(v) for v in items], total, pagination)


@router.post("", response_model=DataResponse[VehicleOut], status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    shipment_id: str,
    body: VehicleCreate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(session, identity).create_vehicle(shipment_id, body)
    return {"data": VehicleOut.model_validate(vehicle)}


@router.get("/{vehicle_id}", response_model=DataResponse[VehicleOut])
async def get_vehicle(
    shipment_id: str,
    vehicle_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(session, identity).get_vehicle(shipment_id, vehicle_id)
    return {"data": VehicleOut.model_validate(vehicle)}


@router.patch("/{vehicle_id}", response_model=DataResponse[VehicleOut])
async def update_vehicle(
    shipment_id: str,
    vehicle_id: str,
    body: VehicleUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(session, identity).update_vehicle(shipment_id, vehicle_id, body)
    return {"data": VehicleOut.model_validate(vehicle)}


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    shipment_id: str,
    vehicle_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    await VehicleService(session, identity).delete_vehicle(shipment_id, vehicle_id)
