"""
tenant_auth.api.routers.tenant_settings

Administrator endpoints for a tenant's authentication settings.

Responsibilities:
- Read directory/federated settings through the redacted view only.
- Update them with validation; blank secrets keep the stored value.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND, HTTP_422_UNPROCESSABLE_ENTITY

from tenant_auth.api.deps import db_session
from tenant_auth.auth.deps import require_admin
from tenant_auth.auth.models import Principal, TenantConfig, redacted_view
from tenant_auth.services.tenant_settings_service import TenantConfigError, TenantSettingsService

router = APIRouter(prefix="/v1/tenant/authentication", tags=["tenant-settings"])


class FederatedSettingsRequest(BaseModel):
    enabled: bool = False
    client_id: str | None = Field(default=None, max_length=256)
    client_secret: str | None = Field(default=None, max_length=1024, repr=False)
    issuer: str | None = Field(default=None, max_length=512)
    callback_url: str | None = Field(default=None, max_length=1024)


class DirectorySettingsRequest(BaseModel):
    enabled: bool = False
    host: str | None = Field(default=None, max_length=512)
    bind_template: str | None = Field(default=None, max_length=512)
    bind_dn: str | None = Field(default=None, max_length=512)
    bind_password: str | None = Field(default=None, max_length=1024, repr=False)
    search_base: str | None = Field(default=None, max_length=512)
    search_filter: str | None = Field(default=None, max_length=512)


def _tenant_id(principal: Principal) -> int:
    if principal.tenant_id is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Tenant not found")
    return principal.tenant_id


def _found(config: TenantConfig | None) -> dict[str, Any]:
    if config is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Tenant not found")
    return redacted_view(config)


@router.get("/federated")
async def get_federated(
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    config = await TenantSettingsService(session=session).get(_tenant_id(principal))
    return _found(config)["federated"]


@router.put("/federated")
async def put_federated(
    body: FederatedSettingsRequest,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    try:
        config = await TenantSettingsService(session=session).update_federated(
            _tenant_id(principal),
            enabled=body.enabled,
            client_id=body.client_id,
            issuer=body.issuer,
            client_secret=body.client_secret,
            callback_url=body.callback_url,
        )
    except TenantConfigError as e:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return _found(config)["federated"]


@router.get("/directory")
async def get_directory(
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    config = await TenantSettingsService(session=session).get(_tenant_id(principal))
    return _found(config)["directory"]


@router.put("/directory")
async def put_directory(
    body: DirectorySettingsRequest,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    try:
        config = await TenantSettingsService(session=session).update_directory(
            _tenant_id(principal),
            enabled=body.enabled,
            host=body.host,
            bind_template=body.bind_template,
            bind_dn=body.bind_dn,
            bind_password=body.bind_password,
            search_base=body.search_base,
            search_filter=body.search_filter,
        )
    except TenantConfigError as e:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return _found(config)["directory"]
