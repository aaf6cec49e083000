"""
tenant_auth.db.repositories.tenants

Repository for tenants and their accounts (settings writes, provisioning).

Responsibilities:
- Create tenants/accounts (provisioning, dev seeding, tests).
- Persist updated directory/federated security settings.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from tenant_auth.auth.models import normalize_email
from tenant_auth.db.models import Account, Tenant


class TenantRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        integration_api_token: str | None = None,
        integration_api_enabled: bool = False,
    ) -> Tenant:
        tenant = Tenant(
            name=name,
            integration_api_token=integration_api_token,
            integration_api_enabled=integration_api_enabled,
        )
        self._session.add(tenant)
        await self._session.flush()
        return tenant

    async def get(self, tenant_id: int) -> Tenant | None:
        return await self._session.get(Tenant, tenant_id)

    async def add_account(
        self,
        *,
        tenant: Tenant | None,
        email: str,
        password_hash: str | None = None,
        active: bool = True,
        admin: bool = False,
    ) -> Account:
        account = Account(
            email=normalize_email(email),
            password_hash=password_hash,
            active=active,
            activated=False,
            admin=admin,
            tenant_id=tenant.id if tenant is not None else None,
        )
        self._session.add(account)
        await self._session.flush()
        return account

    async def set_directory(
        self, tenant_id: int, *, enabled: bool, config: dict[str, Any] | None
    ) -> Tenant | None:
        tenant = await self._session.get(Tenant, tenant_id, with_for_update=True)
        if tenant is None:
            return None
        tenant.directory_enabled = enabled
        tenant.directory_config = config
        await self._session.flush()
        return tenant

    async def set_federated(
        self, tenant_id: int, *, enabled: bool, config: dict[str, Any] | None
    ) -> Tenant | None:
        tenant = await self._session.get(Tenant, tenant_id, with_for_update=True)
        if tenant is None:
            return None
        tenant.federated_enabled = enabled
        tenant.federated_config = config
        await self._session.flush()
        return tenant
