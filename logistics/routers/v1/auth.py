"""Auth router: tenant registration, login, and the current user."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.core.response import DataResponse
from logistics.db.base import get_db
from logistics.routers.deps import get_identity
from logistics.schemas.auth import LoginRequest, MeResponse, RegisterRequest, TokenResponse
from logistics.schemas.organization import OrganizationOut
from logistics.schemas.user import UserOut
from logistics.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=DataResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_db),
):
    """Create an organization and its first admin; returns an access token for that admin."""
    _, _, token = await AuthService(session).register(body)
    return {"data": token}


@router.post("/login", response_model=DataResponse[TokenResponse])
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
):
    token = await AuthService(session).login(body)
    return {"data": token}


@router.get("/me", response_model=DataResponse[MeResponse])
async def me(
    identity: TenantIdentity = Depends(get_identity),
    session: AsyncSession = Depends(get_db),
):
    user = await AuthService(session).current_user(identity)
    return {
        "data": MeResponse(
            user=UserOut.model_validate(user),
            organization=OrganizationOut.model_validate(user.organization),
        )
    }
