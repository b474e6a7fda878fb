"""Shipment service: status lifecycle and every write that links a customer or carrier.

Status moves forward only::

    pending ──> assigned ──> in_transit ──> delivered
       │            │             │
       └────────────┴─────────────┴──────> cancelled

Every write that stores a customer_id or carrier_id first passes the id
through :class:`CrossReferenceValidator`, inside the request transaction.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from logistics.core.exceptions import ConflictError, NotFoundError
from logistics.core.identity import TenantIdentity
from logistics.core.pagination import PaginationParams
from logistics.domain.carrier import Carrier
from logistics.domain.shipment import Shipment, ShipmentStatus
from logistics.repositories.shipment import ShipmentRepository
from logistics.schemas.shipment import ShipmentCreate, ShipmentStats, ShipmentUpdate
from logistics.services.references import CrossReferenceValidator, EntityKind

logger = logging.getLogger(__name__)

TRANSITIONS: dict[ShipmentStatus, frozenset[ShipmentStatus]] = {
    ShipmentStatus.PENDING: frozenset({ShipmentStatus.ASSIGNED, ShipmentStatus.CANCELLED}),
    ShipmentStatus.ASSIGNED: frozenset({ShipmentStatus.IN_TRANSIT, ShipmentStatus.CANCELLED}),
    ShipmentStatus.IN_TRANSIT: frozenset({ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED}),
    ShipmentStatus.DELIVERED: frozenset(),
    ShipmentStatus.CANCELLED: frozenset(),
}

# Statuses a shipment may be in without a carrier
_CARRIERLESS = frozenset({ShipmentStatus.PENDING, ShipmentStatus.CANCELLED})

# The carrier can only be chosen or swapped before pickup
_CARRIER_EDITABLE = frozenset({ShipmentStatus.PENDING, ShipmentStatus.ASSIGNED})


def check_transition(current: ShipmentStatus, target: ShipmentStatus, *, has_carrier: bool) -> None:
    """Raise ConflictError unless *current* -> *target* is allowed."""
    if target not in TRANSITIONS[current]:
        raise ConflictError(f"Cannot move a shipment from '{current.value}' to '{target.value}'")
    if target not in _CARRIERLESS and not has_carrier:
        raise ConflictError(f"A carrier must be assigned before a shipment can be '{target.value}'")


class ShipmentService:
    def __init__(self, session: AsyncSession, identity: TenantIdentity):
        self._repo = ShipmentRepository(session, identity)
        self._references = CrossReferenceValidator(session, identity)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_shipments(
        self,
        pagination: PaginationParams,
        status: ShipmentStatus | None = None,
        customer_id: str | None = None,
        carrier_id: str | None = None,
        search: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={
                "status": status.value if status else None,
                "customer_id": customer_id,
                "carrier_id": carrier_id,
            },
            search=search,
        )

    async def get_shipment(self, shipment_id: str) -> Shipment:
        shipment = await self._repo.get_by_id(shipment_id)
        if not shipment:
            raise NotFoundError("Shipment", shipment_id)
        return shipment

    async def stats(self) -> ShipmentStats:
        counts = await self._repo.count_by("status")
        by_status = {s.value: counts.get(s.value, 0) for s in ShipmentStatus}
        return ShipmentStats(total=sum(by_status.values()), by_status=by_status)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_shipment(self, data: ShipmentCreate) -> Shipment:
        fields = data.model_dump(exclude_none=True)
        await self._references.validate_same_tenant(EntityKind.CUSTOMER, data.customer_id)
        if data.carrier_id is not None:
            await self._assignable_carrier(data.carrier_id)
            fields["status"] = ShipmentStatus.ASSIGNED.value
        else:
            fields["status"] = ShipmentStatus.PENDING.value
        shipment = await self._repo.create(**fields)
        logger.info("Shipment %s created (%s)", shipment.id, shipment.status)
        return shipment

    async def update_shipment(self, shipment_id: str, data: ShipmentUpdate) -> Shipment:
        shipment = await self.get_shipment(shipment_id)
        current = ShipmentStatus(shipment.status)
        fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        target: ShipmentStatus | None = fields.pop("status", None)

        if "customer_id" in fields and fields["customer_id"] != shipment.customer_id:
            await self._references.validate_same_tenant(EntityKind.CUSTOMER, fields["customer_id"])

        carrier_id = fields.get("carrier_id")
        if carrier_id is not None and carrier_id != shipment.carrier_id:
            if current not in _CARRIER_EDITABLE:
                raise ConflictError(f"The carrier of a '{current.value}' shipment cannot change")
            await self._assignable_carrier(carrier_id)
            if current is ShipmentStatus.PENDING and target is None:
                target = ShipmentStatus.ASSIGNED

        if target is not None and target is not current:
            check_transition(current, target, has_carrier=bool(carrier_id or shipment.carrier_id))
            fields["status"] = target.value
            for key, value in self._milestone_dates(shipment, target).items():
                fields.setdefault(key, value)

        updated = await self._repo.update(shipment_id, **fields)
        if not updated:
            raise NotFoundError("Shipment", shipment_id)
        return updated

    async def assign_carrier(self, shipment_id: str, carrier_id: str) -> Shipment:
        shipment = await self.get_shipment(shipment_id)
        current = ShipmentStatus(shipment.status)
        if current not in _CARRIER_EDITABLE:
            raise ConflictError(f"Cannot assign a carrier to a '{current.value}' shipment")
        carrier = await self._assignable_carrier(carrier_id)

        updated = await self._repo.update(
            shipment_id, carrier_id=carrier.id, status=ShipmentStatus.ASSIGNED.value
        )
        if not updated:
            raise NotFoundError("Shipment", shipment_id)
        logger.info("Carrier %s assigned to shipment %s", carrier.id, shipment_id)
        return updated

    async def change_status(self, shipment_id: str, target: ShipmentStatus) -> Shipment:
        shipment = await self.get_shipment(shipment_id)
        current = ShipmentStatus(shipment.status)
        if target is current:
            return shipment
        check_transition(current, target, has_carrier=shipment.carrier_id is not None)

        updated = await self._repo.update(
            shipment_id, status=target.value, **self._milestone_dates(shipment, target)
        )
        if not updated:
            raise NotFoundError("Shipment", shipment_id)
        logger.info("Shipment %s: %s -> %s", shipment_id, current.value, target.value)
        return updated

    async def delete_shipment(self, shipment_id: str) -> None:
        if not await self._repo.delete(shipment_id):
            raise NotFoundError("Shipment", shipment_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _assignable_carrier(self, carrier_id: str) -> Carrier:
        carrier = await self._references.validate_same_tenant(EntityKind.CARRIER, carrier_id)
        if not carrier.active:
            raise ConflictError("Inactive carriers cannot be assigned")
        return carrier

    @staticmethod
    def _milestone_dates(shipment: Shipment, target: ShipmentStatus) -> dict:
        today = date.today()
        if target is ShipmentStatus.IN_TRANSIT and shipment.pickup_date_actual is None:
            return {"pickup_date_actual": today}
        if target is ShipmentStatus.DELIVERED and shipment.delivery_date_actual is None:
            return {"delivery_date_actual": today}
        return {}
