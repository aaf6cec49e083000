"""
tenant_auth.auth.resolver

Strategy registration and password-path dispatch.

Responsibilities:
- Hold the explicit, immutable set of registered strategies (`StrategySet`).
- Pick the single verifier for a password login based on the account's own tenant.
- Short-circuit unknown accounts before any verifier runs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from tenant_auth.auth.directory import DirectoryDelegationVerifier
from tenant_auth.auth.models import Account, TenantConfig, normalize_email
from tenant_auth.auth.outcome import Admitted, ErrorCause, Errored, Outcome, Rejected, RejectReason
from tenant_auth.auth.passwords import CorruptCredentialError, LocalCredentialVerifier
from tenant_auth.auth.store import IdentityStore, StoreError
from tenant_auth.observability.logging import get_logger
from tenant_auth.settings import Settings

log = get_logger(__name__)


class Strategy(enum.StrEnum):
    local = "local"
    directory = "directory"
    federated = "federated"
    bearer = "bearer"
    session = "session"


@dataclass(frozen=True, slots=True)
class StrategySet:
    local_password: bool = True
    federated: bool = False
    bearer: bool = True
    directory_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> StrategySet:
        federated = bool(
            settings.federated_client_id
            and settings.federated_client_secret
            and settings.federated_issuer
        )
        if not federated:
            log.warning(
                "federated strategy not configured",
                missing=[
                    name
                    for name in ("federated_client_id", "federated_client_secret", "federated_issuer")
                    if not getattr(settings, name)
                ],
            )
        return cls(
            local_password=settings.local_password_enabled,
            federated=federated,
            bearer=settings.bearer_enabled,
            directory_timeout=settings.directory_timeout_seconds,
        )


def select_password_strategy(tenant: TenantConfig) -> Strategy:
    # Once enabled, the directory is the single source of truth for passwords.
    return Strategy.directory if tenant.directory_enabled else Strategy.local


class StrategyResolver:
    def __init__(
        self,
        *,
        store: IdentityStore,
        strategies: StrategySet,
        local: LocalCredentialVerifier | None = None,
        directory: DirectoryDelegationVerifier | None = None,
    ) -> None:
        self._store = store
        self._strategies = strategies
        self._local = local or LocalCredentialVerifier()
        self._directory = directory or DirectoryDelegationVerifier(
            timeout=strategies.directory_timeout
        )

    async def _load(self, email: str) -> tuple[Account, TenantConfig] | Outcome:
        try:
            account = await self._store.find_account_by_email(email)
            if account is None:
                return Rejected(RejectReason.unknown_account)
            # Tenant comes from the account, never from the caller.
            tenant = await self._store.load_tenant_config(account)
        except StoreError as e:
            return Errored(ErrorCause.store_failure, str(e))
        if tenant is None:
            return Rejected(RejectReason.no_tenant)
        return account, tenant

    async def resolve_password(
        self, email: str, secret: str, *, require_directory: bool = False
    ) -> Outcome:
        loaded = await self._load(normalize_email(email))
        if not isinstance(loaded, tuple):
            return loaded
        account, tenant = loaded

        strategy = select_password_strategy(tenant)
        if strategy is Strategy.directory:
            outcome = await self._directory.verify(tenant.directory, account, secret)
            if isinstance(outcome, Admitted):
                return replace(outcome, via=Strategy.directory)
            return outcome
        if require_directory:
            return Rejected(RejectReason.directory_disabled)
        if not self._strategies.local_password:
            return Rejected(RejectReason.strategy_disabled)
        return self._verify_local(account, secret)

    def _verify_local(self, account: Account, secret: str) -> Outcome:
        try:
            matched = self._local.verify(account, secret)
        except CorruptCredentialError as e:
            return Errored(ErrorCause.corrupt_credential, str(e))
        if not matched:
            return Rejected(RejectReason.bad_credential)
        return Admitted(account, via=Strategy.local)


# --- Module Notes -----------------------------------------------------------
# Federated and bearer logins have their own entry points and never fall through to
# password verification.
