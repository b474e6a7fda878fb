"""User repository (members of the caller's organization)."""

from logistics.domain.user import User
from logistics.repositories.base import TenantScopedRepository


class UserRepository(TenantScopedRepository[User]):
    model = User
    search_columns = ("email", "first_name", "last_name")
