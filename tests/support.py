"""
tests.support

Shared fakes for unit tests.

Responsibilities:
- In-memory identity store with call recording and fault injection.
- Recording activator and a counting local verifier.
- Cheap Argon2 parameters so hashing does not dominate test time.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from argon2 import PasswordHasher

from tenant_auth.auth.models import Account, DirectoryConfig, FederatedConfig, TenantConfig
from tenant_auth.auth.passwords import LocalCredentialVerifier
from tenant_auth.auth.store import StoreError

FAST_HASHER = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


class InMemoryIdentityStore:
    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.tenants: dict[int, TenantConfig] = {}
        self.tokens: dict[str, int] = {}
        self.calls: list[str] = []
        self.fail = False

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise StoreError("database is locked")

    def add_tenant(
        self,
        name: str,
        *,
        directory: DirectoryConfig | None = None,
        directory_enabled: bool = False,
        federated: FederatedConfig | None = None,
        federated_enabled: bool = False,
    ) -> TenantConfig:
        tenant = TenantConfig(
            tenant_id=len(self.tenants) + 1,
            name=name,
            directory_enabled=directory_enabled,
            directory=directory,
            federated_enabled=federated_enabled,
            federated=federated,
        )
        self.tenants[tenant.tenant_id] = tenant
        return tenant

    def add_account(
        self,
        email: str,
        *,
        tenant: TenantConfig | None,
        password: str | None = None,
        **flags: Any,
    ) -> Account:
        account = Account(
            id=len(self.accounts) + 1,
            email=email.lower(),
            tenant_id=tenant.tenant_id if tenant is not None else None,
            password_hash=FAST_HASHER.hash(password) if password is not None else None,
            **flags,
        )
        self.accounts[account.id] = account
        return account

    def update(self, account_id: int, **changes: Any) -> Account:
        account = dataclasses.replace(self.accounts[account_id], **changes)
        self.accounts[account_id] = account
        return account

    async def find_account_by_email(self, email: str) -> Account | None:
        self._record("find_account_by_email")
        return next((a for a in self.accounts.values() if a.email == email.lower()), None)

    async def find_account_by_id(self, account_id: int) -> Account | None:
        self._record("find_account_by_id")
        return self.accounts.get(account_id)

    async def find_account_by_session_token(self, token: str) -> Account | None:
        self._record("find_account_by_session_token")
        account_id = self.tokens.get(token)
        return self.accounts.get(account_id) if account_id is not None else None

    async def load_tenant_config(self, account: Account) -> TenantConfig | None:
        self._record("load_tenant_config")
        if account.tenant_id is None:
            return None
        return self.tenants.get(account.tenant_id)


class RecordingActivator:
    def __init__(self, store: InMemoryIdentityStore) -> None:
        self._store = store
        self.activated: list[int] = []

    async def maybe_activate(self, account: Account) -> Account:
        self.activated.append(account.id)
        return self._store.update(account.id, activated=True)


class CountingLocalVerifier(LocalCredentialVerifier):
    def __init__(self) -> None:
        super().__init__(FAST_HASHER)
        self.calls = 0

    def verify(self, account: Account, secret: str) -> bool:
        self.calls += 1
        return super().verify(account, secret)


class RecordingLog:
    """Stands in for a module-level structlog logger."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def _emit(self, level: str, event: str, **kw: Any) -> None:
        self.events.append((level, event, kw))

    def info(self, event: str, **kw: Any) -> None:
        self._emit("info", event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._emit("warning", event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._emit("error", event, **kw)


# --- Module Notes -----------------------------------------------------------
# The fake lowercases emails on both write and lookup, mirroring `SqlIdentityStore`.
