"""Shipment router: CRUD, carrier assignment, status changes, stats."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.response import DataResponse, ListResponse, paginated
from logistics.db.base import get_db
from logistics.domain.shipment import ShipmentStatus
from logistics.routers.deps import get_identity
from logistics.schemas.shipment import (
    AssignCarrierRequest,
    ShipmentCreate,
    ShipmentOut,
    ShipmentStats,
    ShipmentUpdate,
    StatusChangeRequest,
)
from logistics.services.shipment import ShipmentService

router = APIRouter(prefix="/shipments", tags=["Shipments"])


@router.get("", response_model=ListResponse[ShipmentOut])
async def list_shipments(
    filter_status: Optional[ShipmentStatus] = Query(default=None, alias="status"),
    customer_id: Optional[str] = Query(default=None, alias="customerId"),
    carrier_id: Optional[str] = Query(default=None, alias="carrierId"),
    q: Optional[str] = Query(default=None, description="Search pickup/delivery city and notes"),
    pagination: PaginationParams = Depends(),
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    items, total = await ShipmentService(session, identity).list_shipments(
        pagination,
        status=filter_status,
        customer_id=customer_id,
        carrier_id=carrier_id,
        search=q,
    )
    return paginated([ShipmentOut.model_validate(s) for s in items], total, pagination)


@router.get("/stats", response_model=DataResponse[ShipmentStats])
async def shipment_stats(
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    return {"data": await ShipmentService(session, identity).stats()}


@router.post("", response_model=DataResponse[ShipmentOut], status_code=status.HTTP_201_CREATED)
async def create_shipment(
    body: ShipmentCreate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    """Create a shipment. Status is `assigned` when a carrier is given, else `pending`."""
    shipment = await ShipmentService(session, identity).create_shipment(body)
    return {"data": ShipmentOut.model_validate(shipment)}


@router.get("/{shipment_id}", response_model=DataResponse[ShipmentOut])
async def get_shipment(
    shipment_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    shipment = await ShipmentService(session, identity).get_shipment(shipment_id)
    return {"data": ShipmentOut.model_validate(shipment)}


@router.patch("/{shipment_id}", response_model=DataResponse[ShipmentOut])
async def update_shipment(
    shipment_id: str,
    body: ShipmentUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    shipment = await ShipmentService(session, identity).update_shipment(shipment_id, body)
    return {"data": ShipmentOut.model_validate(shipment)}


@router.post("/{shipment_id}/assign-carrier", response_model=DataResponse[ShipmentOut])
async def assign_carrier(
    shipment_id: str,
    body: AssignCarrierRequest,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    shipment = await ShipmentService(session, identity).assign_carrier(shipment_id, body.carrier_id)
    return {"data": ShipmentOut.model_validate(shipment)}


@router.post("/{shipment_id}/status", response_model=DataResponse[ShipmentOut])
async def change_status(
    shipment_id: str,
    body: StatusChangeRequest,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    shipment = await ShipmentService(session, identity).change_status(shipment_id, body.status)
    return {"data": ShipmentOut.model_validate(shipment)}


@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shipment(
    shipment_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    await ShipmentService(session, identity).delete_shipment(shipment_id)
