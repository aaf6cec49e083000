"""
tenant_auth.services.tenant_settings_service

Tenant security settings (directory delegation + federated login).

Responsibilities:
- Validate settings before they can be enabled.
- Keep stored secrets when an update leaves the secret field blank.
- Own the commit for settings writes.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from tenant_auth.auth.directory import DirectoryMisconfiguredError, render_template
from tenant_auth.auth.models import TenantConfig
from tenant_auth.db.repositories.identity import to_tenant_config
from tenant_auth.db.repositories.tenants import TenantRepo
from tenant_auth.observability.logging import get_logger

log = get_logger(__name__)


class TenantConfigError(ValueError):
    pass


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_template(template: str | None, label: str) -> None:
    if not template or "{email}" not in template:
        raise TenantConfigError(f"{label} must contain {{email}}.")
    try:
        render_template(template, "user@example.com")
    except DirectoryMisconfiguredError as e:
        raise TenantConfigError(f"{label} may only use the {{email}} placeholder.") from e


class TenantSettingsService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._tenants = TenantRepo(session)

    async def get(self, tenant_id: int) -> TenantConfig | None:
        tenant = await self._tenants.get(tenant_id)
        return to_tenant_config(tenant) if tenant is not None else None

    async def update_federated(
        self,
        tenant_id: int,
        *,
        enabled: bool,
        client_id: str | None,
        issuer: str | None,
        client_secret: str | None = None,
        callback_url: str | None = None,
    ) -> TenantConfig | None:
        tenant = await self._tenants.get(tenant_id)
        if tenant is None:
            return None
        current: dict[str, Any] = dict(tenant.federated_config or {})

        client_id = _clean(client_id)
        issuer = _clean(issuer)
        if enabled and not client_id:
            raise TenantConfigError("Client ID cannot be empty when federated login is enabled.")
        if enabled and not issuer:
            raise TenantConfigError("Issuer cannot be empty when federated login is enabled.")

        config = {
            "client_id": client_id or current.get("client_id"),
            "issuer": issuer or current.get("issuer"),
            # Blank secret on the form means "unchanged".
            "client_secret": client_secret or current.get("client_secret"),
            "callback_url": _clean(callback_url) or current.get("callback_url"),
        }
        tenant = await self._tenants.set_federated(tenant_id, enabled=enabled, config=config)
        await self._session.commit()
        log.info("tenant.federated_updated", tenant_id=tenant_id, enabled=enabled)
        return to_tenant_config(tenant) if tenant is not None else None

    async def update_directory(
        self,
        tenant_id: int,
        *,
        enabled: bool,
        host: str | None,
        bind_template: str | None = None,
        bind_dn: str | None = None,
        bind_password: str | None = None,
        search_base: str | None = None,
        search_filter: str | None = None,
    ) -> TenantConfig | None:
        tenant = await self._tenants.get(tenant_id)
        if tenant is None:
            return None
        current: dict[str, Any] = dict(tenant.directory_config or {})

        host = _clean(host)
        bind_template = _clean(bind_template)
        search_base = _clean(search_base)
        search_filter = _clean(search_filter) or current.get("search_filter") or "(mail={email})"
        if enabled:
            if not host:
                raise TenantConfigError("Directory host cannot be empty when directory login is enabled.")
            if search_base is None:
                _check_template(bind_template, "Bind template")
            else:
                _check_template(search_filter, "Search filter")

        config = {
            "host": host or current.get("host"),
            "bind_template": bind_template or current.get("bind_template"),
            "bind_dn": _clean(bind_dn) or current.get("bind_dn"),
            "bind_password": bind_password or current.get("bind_password"),
            "search_base": search_base,
            "search_filter": search_filter,
        }
        tenant = await self._tenants.set_directory(tenant_id, enabled=enabled, config=config)
        await self._session.commit()
        log.info("tenant.directory_updated", tenant_id=tenant_id, enabled=enabled)
        return to_tenant_config(tenant) if tenant is not None else None


# --- Module Notes -----------------------------------------------------------
# Validation failures leave the stored settings untouched (nothing is flushed before
# the checks run).
