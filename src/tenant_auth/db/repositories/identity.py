"""
tenant_auth.db.repositories.identity

SQL implementation of the identity store used by the authentication core.

Responsibilities:
- Look up accounts by email (case-insensitive), id, and integration API token.
- Load a tenant's security configuration for an account.
- Run the first-login activation side effect.
- Convert ORM rows to frozen domain objects and SQLAlchemy errors to `StoreError`.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_auth.auth.models import (
    Account,
    DirectoryConfig,
    FederatedConfig,
    TenantConfig,
    normalize_email,
)
from tenant_auth.auth.store import StoreError
from tenant_auth.db.models import Account as AccountRow
from tenant_auth.db.models import Tenant as TenantRow


def to_account(row: AccountRow) -> Account:
    return Account(
        id=row.id,
        email=row.email,
        tenant_id=row.tenant_id,
        password_hash=row.password_hash,
        active=row.active,
        activated=row.activated,
        admin=row.admin,
    )


def to_tenant_config(row: TenantRow) -> TenantConfig:
    return TenantConfig(
        tenant_id=row.id,
        name=row.name,
        directory_enabled=row.directory_enabled,
        directory=DirectoryConfig.from_dict(row.directory_config),
        federated_enabled=row.federated_enabled,
        federated=FederatedConfig.from_dict(row.federated_config),
    )


class SqlIdentityStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _first(self, stmt: Select[Any]) -> Any:
        try:
            return (await self._session.execute(stmt.limit(1))).scalars().first()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    async def find_account_by_email(self, email: str) -> Account | None:
        stmt = select(AccountRow).where(func.lower(AccountRow.email) == normalize_email(email))
        row = await self._first(stmt)
        return to_account(row) if row is not None else None

    async def find_account_by_id(self, account_id: int) -> Account | None:
        try:
            row = await self._session.get(AccountRow, account_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return to_account(row) if row is not None else None

    async def find_account_by_session_token(self, token: str) -> Account | None:
        tenant = await self._first(
            select(TenantRow).where(
                TenantRow.integration_api_token == token,
                TenantRow.integration_api_enabled.is_(True),
            )
        )
        if tenant is None:
            return None
        # The token acts as the tenant's first administrator.
        row = await self._first(
            select(AccountRow)
            .where(AccountRow.tenant_id == tenant.id, AccountRow.admin.is_(True))
            .order_by(AccountRow.id)
        )
        return to_account(row) if row is not None else None

    async def load_tenant_config(self, account: Account) -> TenantConfig | None:
        if account.tenant_id is None:
            return None
        try:
            row = await self._session.get(TenantRow, account.tenant_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return to_tenant_config(row) if row is not None else None


class SqlAccountActivator:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def maybe_activate(self, account: Account) -> Account:
        try:
            row = await self._session.get(AccountRow, account.id, with_for_update=True)
            if row is None or row.activated:
                return account
            row.activated = True
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreError(str(e)) from e
        return dataclasses.replace(account, activated=True)


# --- Module Notes -----------------------------------------------------------
# Read paths never write; the activator is the only mutation performed during a login.
