"""Pydantic schemas package.

Folder intent:
  common.py        — CamelModel base, HealthResponse
  auth.py          — register / login / me
  organization.py  — the caller's organization
  user.py          — organization members (admin-managed)
  customer.py, carrier.py, shipment.py, vehicle.py — tenant-owned records

No request schema declares organization_id; it always comes from the
authenticated identity.
"""
