"""Services package — all business logic lives here, never in routers.

Files:
  auth.py          — TenantContextResolver (token -> TenantIdentity), login, registration
  references.py    — CrossReferenceValidator for writes that link customers/carriers
  shipment.py      — shipment lifecycle and status transitions
  customer.py, carrier.py, vehicle.py, user.py, organization.py — per-entity CRUD

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
