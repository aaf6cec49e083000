"""
tenant_auth.api.app

FastAPI app factory for the tenant authentication service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Build the strategy set once from settings (explicit registration, no globals).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tenant_auth import __version__
from tenant_auth.api.routers.auth import router as auth_router
from tenant_auth.api.routers.health import router as health_router
from tenant_auth.api.routers.tenant_settings import router as tenant_settings_router
from tenant_auth.auth.resolver import StrategySet
from tenant_auth.db.init_db import init_db
from tenant_auth.db.session import create_engine, create_sessionmaker
from tenant_auth.observability.logging import configure_logging, get_logger
from tenant_auth.observability.middleware import RequestContextMiddleware
from tenant_auth.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.strategies = StrategySet.from_settings(settings)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Tenant Authentication Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(tenant_settings_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; policy stays in
# `tenant_auth.auth` and `tenant_auth.services`.
