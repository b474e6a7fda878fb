"""Customer repository."""

from logistics.domain.customer import Customer
from logistics.repositories.base import TenantScopedRepository


class CustomerRepository(TenantScopedRepository[Customer]):
    model = Customer
    search_columns = ("name", "email", "phone")
