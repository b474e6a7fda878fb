"""Routers package — HTTP endpoint definitions.

Files:
  deps.py  — get_identity (bearer token -> TenantIdentity)
  v1/      — Versioned API routes (/api/v1/*)
"""
