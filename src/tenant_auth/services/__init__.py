"""
tenant_auth.services

Service-layer package.

Responsibilities:
- Compose verifiers, admission policy and session lifecycle into caller-facing operations.
- Own transaction boundaries for tenant security settings updates.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake stores/sessions.
