"""v1 router package — all /api/v1/* endpoints live here.

Files:
  auth.py          — register, login, me (the only routes without an identity)
  organization.py  — the caller's organization
  users.py         — member management (admins)
  customers.py, carriers.py, shipments.py, vehicles.py — tenant-owned records

Rule: Routers only handle HTTP (request parsing, response shaping).
      Every authenticated route takes its TenantIdentity from routers.deps.get_identity.
"""
