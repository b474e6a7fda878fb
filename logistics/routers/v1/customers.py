"""Customer CRUD router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.response import DataResponse, ListResponse, paginated
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from logistics.services.customer import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=ListResponse[CustomerOut])
async def list_customers(
    q: Optional[str] = Query(default=None, description="Search name, email, phone"),
    pagination: PaginationParams = Depends(),
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    items, total = await CustomerService(session, identity).list_customers(pagination, search=q)
    return paginated([CustomerOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[CustomerOut], status_code=status.HTTP_201_CREATED)
async def create_customer(
    body: CustomerCreate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    customer = await CustomerService(session, identity).create_customer(body)
    return {"data": CustomerOut.model_validate(customer)}


@router.get("/{customer_id}", response_model=DataResponse[CustomerOut])
async def get_customer(
    customer_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    customer = await CustomerService(session, identity).get_customer(customer_id)
    return {"data": CustomerOut.model_validate(customer)}


@router.patch("/{customer_id}", response_model=DataResponse[CustomerOut])
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    customer = await CustomerService(session, identity).update_customer(customer_id, body)
    return {"data": CustomerOut.model_validate(customer)}


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    """Delete a customer together with its shipments."""
    await CustomerService(session, identity).delete_customer(customer_id)
