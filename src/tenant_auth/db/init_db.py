"""
tenant_auth.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create the tenant/account tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from tenant_auth.db import models  # noqa: F401  # register tables on Base.metadata
from tenant_auth.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Production runs Alembic migrations (see `alembic/env.py`) instead of create_all.
