"""Domain package — all ORM models, imported here so every mapper is configured together.

Folder intent:
  organization.py — tenant root; soft-deactivated, never deleted
  user.py         — members of one organization
  customer.py     — tenant-owned customers
  carrier.py      — tenant-owned carriers
  shipment.py     — aggregate root; references one customer and at most one carrier
  vehicle.py      — vehicles on a shipment, scoped through it
  mixins.py       — shared IdMixin, TimestampMixin, TenantMixin

The tables themselves come from ``logistics/db/migrations``.
"""

from logistics.domain.carrier import Carrier
from logistics.domain.customer import Customer
from logistics.domain.organization import Organization
from logistics.domain.shipment import Shipment, ShipmentStatus
from logistics.domain.user import User
from logistics.domain.vehicle import Vehicle, VehicleCondition

__all__ = [
    "Carrier",
    "Customer",
    "Organization",
    "Shipment",
    "ShipmentStatus",
    "User",
    "Vehicle",
    "VehicleCondition",
]
