"""Customer service."""

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import NotFoundError
from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.domain.customer import Customer
from logistics.repositories.customer import CustomerRepository
from logistics.schemas.customer import CustomerCreate, CustomerUpdate


class CustomerService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._repo = CustomerRepository(session, identity)

    async def list_customers(self, pagination: PaginationParams, search: str | None = None):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            search=search,
        )

    async def get_customer(self, customer_id: str) -> Customer:
        customer = await self._repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    async def create_customer(self, data: CustomerCreate) -> Customer:
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_customer(self, customer_id: str, data: CustomerUpdate) -> Customer:
        updated = await self._repo.update(customer_id, **data.model_dump(exclude_unset=True))
        if not updated:
            raise NotFoundError("Customer", customer_id)
        return updated

    async def delete_customer(self, customer_id: str) -> None:
        # Shipments of this customer go with it (ON DELETE CASCADE)
        if not await self._repo.delete(customer_id):
            raise NotFoundError("Customer", customer_id)
