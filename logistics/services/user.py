"""User management within the caller's organization (admins only)."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from logistics.core.identity import Role, TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.core.security import hash_password
from logistics.domain.user import User
from logistics.repositories.account import AccountRepository
from logistics.repositories.user import UserRepository
from logistics.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        if not identity.is_admin:
            raise ForbiddenError("Only administrators can manage users")
        self._identity = identity
        self._repo = UserRepository(session, identity)
        self._accounts = AccountRepository(session)

    async def list_users(self, pagination: PaginationParams, search: str | None = None):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            search=search,
        )

    async def get_user(self, user_id: str) -> User:
        user = await self._repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def create_user(self, data: UserCreate) -> User:
        email = data.email.strip().lower()
        # Emails are unique across all organizations
        if await self._accounts.email_taken(email):
            raise ConflictError("A user with this email already exists")
        user = await self._repo.create(
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role.value,
        )
        logger.info("User %s created in organization %s", user.id, self._identity.organization_id)
        return user

    async def update_user(self, user_id: str, data: UserUpdate) -> User:
        if user_id == self._identity.user_id and (
            data.active is False or (data.role is not None and data.role is not Role.ADMIN)
        ):
            raise ConflictError("You cannot deactivate or demote your own account")

        fields = data.model_dump(exclude_unset=True, exclude={"password", "role"})
        if data.role is not None:
            fields["role"] = data.role.value
        if data.password:
            fields["password_hash"] = hash_password(data.password)

        updated = await self._repo.update(user_id, **fields)
        if not updated:
            raise NotFoundError("User", user_id)
        return updated

    async def delete_user(self, user_id: str) -> None:
        if user_id == self._identity.user_id:
            raise ConflictError("You cannot delete your own account")
        if not await self._repo.delete(user_id):
            raise NotFoundError("User", user_id)
