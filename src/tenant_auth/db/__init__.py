"""
tenant_auth.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and the SQL identity store.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing outside `db.repositories` touches ORM rows; the authentication core only
# sees the frozen dataclasses from `tenant_auth.auth.models`.
