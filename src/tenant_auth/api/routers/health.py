"""
tenant_auth.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with identity-store connectivity validation and
  the registered strategy set.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_auth.api.deps import db_session, strategies_from_app
from tenant_auth.auth.resolver import StrategySet

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    strategies: StrategySet = Depends(strategies_from_app),
) -> dict[str, Any]:
    # Every login needs the identity store; without it nothing can be admitted.
    await session.execute(text("SELECT 1"))
    return {
        "status": "ready",
        "strategies": {
            "local_password": strategies.local_password,
            "federated": strategies.federated,
            "bearer": strategies.bearer,
        },
    }


# --- Module Notes -----------------------------------------------------------
# Directory servers are per tenant and are not probed here.
