"""
tenant_auth.auth.store

Identity store contract consumed by the authentication core.

Responsibilities:
- Describe the narrow read interface (`IdentityStore`) over persistence.
- Describe the first-login activation collaborator (`AccountActivator`).
- Define `StoreError`, the only exception a store implementation may raise.
"""

from __future__ import annotations

from typing import Protocol

from tenant_auth.auth.models import Account, TenantConfig


class StoreError(Exception):
    """The backing store could not answer (connection lost, query failed, ...)."""


class IdentityStore(Protocol):
    async def find_account_by_email(self, email: str) -> Account | None: ...

    async def find_account_by_id(self, account_id: int) -> Account | None: ...

    async def find_account_by_session_token(self, token: str) -> Account | None: ...

    async def load_tenant_config(self, account: Account) -> TenantConfig | None: ...


class AccountActivator(Protocol):
    async def maybe_activate(self, account: Account) -> Account: ...


# --- Module Notes -----------------------------------------------------------
# The SQL implementation lives in `tenant_auth.db.repositories.identity`; tests use an
# in-memory fake with the same shape.
