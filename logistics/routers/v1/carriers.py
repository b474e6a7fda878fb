"""Carrier CRUD router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.response import DataResponse, ListResponse, paginated
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.carrier import CarrierCreate, CarrierOut, CarrierUpdate
from logistics.services.carrier import CarrierService

router = APIRouter(prefix="/carriers", tags=["Carriers"])


@router.get("", response_model=ListResponse[CarrierOut])
async def list_carriers(
    q: Optional[str] = Query(default=None, description="Search company name, email, MC or DOT number"),
    active: Optional[bool] = Query(default=None, description="Filter by active flag"),
    pagination: PaginationParams = Depends(),
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    items, total = await CarrierService(session, identity).list_carriers(
        pagination, search=q, active=active
    )
    return paginated([CarrierOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[CarrierOut], status_code=status.HTTP_201_CREATED)
async def create_carrier(
    body: CarrierCreate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    carrier = await CarrierService(session, identity).create_carrier(body)
    return {"data": CarrierOut.model_validate(carrier)}


@router.get("/{carrier_id}", response_model=DataResponse[CarrierOut])
async def get_carrier(
    carrier_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    carrier = await CarrierService(session, identity).get_carrier(carrier_id)
    return {"data": CarrierOut.model_validate(carrier)}


@router.patch("/{carrier_id}", response_model=DataResponse[CarrierOut])
async def update_carrier(
    carrier_id: str,
    body: CarrierUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    carrier = await CarrierService(session, identity).update_carrier(carrier_id, body)
    return {"data": CarrierOut.model_validate(carrier)}


@router.post("/{carrier_id}/activate", response_model=DataResponse[CarrierOut])
async def activate_carrier(
    carrier_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    carrier = await CarrierService(session, identity).set_active(carrier_id, True)
    return {"data": CarrierOut.model_validate(carrier)}


@router.post("/{carrier_id}/deactivate", response_model=DataResponse[CarrierOut])
async def deactivate_carrier(
    carrier_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    """Inactive carriers stay on existing shipments but cannot be assigned to new ones."""
    carrier = await CarrierService(session, identity).set_active(carrier_id, False)
    return {"data": CarrierOut.model_validate(carrier)}


@router.delete("/{carrier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_carrier(
    carrier_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    await CarrierService(session, identity).delete_carrier(carrier_id)
