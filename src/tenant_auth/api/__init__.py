"""
tenant_auth.api

HTTP surface of the tenant authentication service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers only translate outcomes to HTTP; every decision is made in `tenant_auth.auth`.
