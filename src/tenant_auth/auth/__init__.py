"""
tenant_auth.auth

Authentication core.

Responsibilities:
- Verifiers (local password, directory, federated, bearer) returning tagged outcomes.
- Admission policy and session lifecycle.
- FastAPI auth dependencies and signed session transport.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Verifiers never import SQLAlchemy; persistence is reached only through
# the `IdentityStore` protocol.
