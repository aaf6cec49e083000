"""
tenant_auth.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Build the request-scoped `AuthenticationService` over the SQL identity store.
- Encapsulate app.state access patterns (engine/sessionmaker/strategy set).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenant_auth.auth.resolver import StrategySet
from tenant_auth.db.repositories.identity import SqlAccountActivator, SqlIdentityStore
from tenant_auth.services.authentication_service import AuthenticationService
from tenant_auth.settings import Settings, get_settings


def settings_dep() -> Settings:
    return get_settings()


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `tenant_auth.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def strategies_from_app(request: Request) -> StrategySet:
    # Built once at startup; read-only for the lifetime of the process.
    return request.app.state.strategies  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def auth_service(
    session: AsyncSession = Depends(db_session),
    strategies: StrategySet = Depends(strategies_from_app),
) -> AuthenticationService:
    return AuthenticationService(
        store=SqlIdentityStore(session),
        strategies=strategies,
        activator=SqlAccountActivator(session),
    )


# --- Module Notes -----------------------------------------------------------
# One AuthenticationService per request: no mutable state is shared between attempts.
