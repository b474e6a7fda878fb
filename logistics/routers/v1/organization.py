"""Organization router: the caller's own tenant."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.response import DataResponse
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.organization import OrganizationOut, OrganizationUpdate
from logistics.services.organization import OrganizationService

router = APIRouter(prefix="/organization", tags=["Organization"])


@router.get("", response_model=DataResponse[OrganizationOut])
async def get_organization(
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    organization = await OrganizationService(session, identity).get_current()
    return {"data": OrganizationOut.model_validate(organization)}


@router.patch("", response_model=DataResponse[OrganizationOut])
async def update_organization(
    body: OrganizationUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    organization = await OrganizationService(session, identity).update_current(body)
    return {"data": OrganizationOut.model_validate(organization)}


@router.post("/deactivate", response_model=DataResponse[OrganizationOut])
async def deactivate_organization(
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    """Soft-deactivate the caller's organization. Every member is locked out afterwards."""
    organization = await OrganizationService(session, identity).deactivate_current()
    return {"data": OrganizationOut.model_validate(organization)}
