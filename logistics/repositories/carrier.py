"""Carrier repository."""

from logistics.domain.carrier import Carrier
from logistics.repositories.base import TenantScopedRepository


class CarrierRepository(TenantScopedRepository[Carrier]):
    model = Carrier
    search_columns = ("company_name", "email", "mc_number", "dot_number")

    async def set_active(self, carrier_id: str, active: bool) -> Carrier | None:
        # update() drops None but keeps False, so this covers both directions
        return await self.update(carrier_id, active=active)
