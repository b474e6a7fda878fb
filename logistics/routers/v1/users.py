"""User management router (admins only)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.response import DataResponse, ListResponse, paginated
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.user import UserCreate, UserOut, UserUpdate
from logistics.services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ListResponse[UserOut])
async def list_users(
    q: Optional[str] = Query(default=None, description="Search email and name"),
    pagination: PaginationParams = Depends(),
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    items, total = await UserService(session, identity).list_users(pagination, search=q)
    return paginated([UserOut.model_validate(u) for u in items], total, pagination)


@router.post("", response_model=DataResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    user = await UserService(session, identity).create_user(body)
    return {"data": UserOut.model_validate(user)}


@router.get("/{user_id}", response_model=DataResponse[UserOut])
async def get_user(
    user_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    user = await UserService(session, identity).get_user(user_id)
    return {"data": UserOut.model_validate(user)}


@router.patch("/{user_id}", response_model=DataResponse[UserOut])
async def update_user(
    user_id: str,
    body: UserUpdate,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    user = await UserService(session, identity).update_user(user_id, body)
    return {"data": UserOut.model_validate(user)}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    await UserService(session, identity).delete_user(user_id)
