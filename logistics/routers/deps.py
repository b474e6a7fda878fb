"""Shared FastAPI dependencies for authenticated routes."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.identity import TenantIdentity
from logistics.db.base import get_db
from logistics.services.auth import TenantContextResolver

_bearer = HTTPBearer(auto_error=False)


async def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    session: AsyncSession = Depends(get_db),
) -> TenantIdentity:
    """The only way a handler obtains a TenantIdentity.

    Resolved in the request's own session, so the user/organization lookup
    is part of the same transaction as the handler's work.
    """
    token = credentials.credentials if credentials else None
    identity = await TenantContextResolver(session).resolve(token)
    # Read back by RequestLogMiddleware
    request.state.organization_id = identity.organization_id
    request.state.user_id = identity.user_id
    return identity
