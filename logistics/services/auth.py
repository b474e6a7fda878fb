"""Authentication: turning a bearer token into a TenantIdentity, and login."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.config import settings
from logistics.core.exceptions import (
    AccountInactiveError,
    ConflictError,
    ForbiddenError,
    UnauthenticatedError,
)
from logistics.core.identity import Role, TenantIdentity
from logistics.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from logistics.domain.organization import Organization
from logistics.domain.user import User
from logistics.repositories.account import AccountRepository
from logistics.schemas.auth import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)


class TenantContextResolver:
    """Builds the request's :class:`TenantIdentity` from an access token.

    The organization and role always come from the user's current database
    row; the token only names the user. Deactivating a user or their
    organization therefore takes effect on the very next request.
    """

    def __init__(self, session: AsyncSession):
        self._accounts = AccountRepository(session)

    async def resolve(self, token: str | None) -> TenantIdentity:
        if not token:
            raise UnauthenticatedError("no bearer token")
        try:
            claims = decode_access_token(token)
        except TokenError as exc:
            raise UnauthenticatedError(str(exc)) from exc

        user = await self._accounts.get_user_with_organization(claims["sub"])
        if user is None:
            raise UnauthenticatedError(f"user {claims['sub']} does not exist")
        if not user.active:
            raise AccountInactiveError(f"user {user.id} is deactivated")
        if user.organization is None or not user.organization.active:
            # Hard fail: members of a deactivated organization get no read path either
            raise AccountInactiveError(f"organization {user.organization_id} is deactivated")

        return TenantIdentity(
            organization_id=user.organization_id,
            user_id=user.id,
            role=user.role,
        )


class AuthService:
    def __init__(self, session: AsyncSession):
        self._accounts = AccountRepository(session)

    async def login(self, data: LoginRequest) -> TokenResponse:
        user = await self._accounts.get_user_by_email(data.email)
        # Same error for unknown email and wrong password
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthenticatedError("bad credentials", message="Invalid email or password")
        if not user.active or user.organization is None or not user.organization.active:
            raise AccountInactiveError(f"login refused for inactive account {user.id}")

        logger.info("User %s logged in (organization %s)", user.id, user.organization_id)
        return issue_token(user.id)

    async def register(self, data: RegisterRequest) -> tuple[Organization, User, TokenResponse]:
        """Onboard a new tenant: its organization plus a first admin user."""
        if not settings.allow_registration:
            raise ForbiddenError("Registration is disabled")
        email = data.email.strip().lower()
        if await self._accounts.slug_taken(data.organization_slug):
            raise ConflictError("An organization with this slug already exists")
        if await self._accounts.email_taken(email):
            raise ConflictError("A user with this email already exists")

        organization = await self._accounts.create_organization(
            name=data.organization_name, slug=data.organization_slug
        )
        user = await self._accounts.create_user(
            organization_id=organization.id,
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=Role.ADMIN.value,
        )
        logger.info("Organization %s (%s) registered", organization.id, organization.slug)
        return organization, user, issue_token(user.id)

    async def current_user(self, identity: TenantIdentity) -> User:
        user = await self._accounts.get_user_with_organization(identity.user_id)
        if user is None:
            raise UnauthenticatedError(f"user {identity.user_id} disappeared")
        return user


def issue_token(user_id: str) -> TokenResponse:
    expires_in = timedelta(minutes=settings.access_token_expire_minutes)
    return TokenResponse(
        access_token=create_access_token(user_id, expires_in=expires_in),
        expires_in=int(expires_in.total_seconds()),
    )
