"""
tenant_auth.services.authentication_service

Authentication facade consumed by the web layer.

Responsibilities:
- Expose one entry point per credential kind plus session establish/restore.
- Route every candidate account through the admission policy (single gate).
- Emit the audit signal for every rejected or errored attempt, without secrets.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from tenant_auth.auth.admission import AdmissionPolicy
from tenant_auth.auth.bearer import BearerTokenVerifier
from tenant_auth.auth.directory import DirectoryDelegationVerifier
from tenant_auth.auth.federated import FederatedIdentityVerifier, extract_email
from tenant_auth.auth.models import Account, normalize_email
from tenant_auth.auth.outcome import Admitted, Errored, Outcome, Rejected, RejectReason
from tenant_auth.auth.passwords import LocalCredentialVerifier
from tenant_auth.auth.resolver import Strategy, StrategyResolver, StrategySet
from tenant_auth.auth.sessions import SessionLifecycleManager
from tenant_auth.auth.store import AccountActivator, IdentityStore
from tenant_auth.observability.logging import fingerprint, get_logger

log = get_logger(__name__)


class AuthenticationService:
    def __init__(
        self,
        *,
        store: IdentityStore,
        strategies: StrategySet,
        activator: AccountActivator,
        local: LocalCredentialVerifier | None = None,
        directory: DirectoryDelegationVerifier | None = None,
        admission: AdmissionPolicy | None = None,
    ) -> None:
        self._strategies = strategies
        self._admission = admission or AdmissionPolicy()
        self._resolver = StrategyResolver(
            store=store, strategies=strategies, local=local, directory=directory
        )
        self._federated = FederatedIdentityVerifier(store)
        self._bearer = BearerTokenVerifier(store)
        self._sessions = SessionLifecycleManager(
            store=store, activator=activator, admission=self._admission
        )

    async def authenticate_local(self, email: str, secret: str) -> Outcome:
        outcome = await self._resolver.resolve_password(email, secret)
        return self._finish(outcome, strategy=Strategy.local, email=normalize_email(email))

    async def authenticate_directory(self, email: str, secret: str) -> Outcome:
        outcome = await self._resolver.resolve_password(email, secret, require_directory=True)
        return self._finish(outcome, strategy=Strategy.directory, email=normalize_email(email))

    async def authenticate_federated(self, profile: Mapping[str, Any] | None) -> Outcome:
        email = extract_email(profile) if isinstance(profile, Mapping) else None
        if not self._strategies.federated:
            outcome: Outcome = Rejected(RejectReason.federation_disabled)
        else:
            outcome = await self._federated.verify(profile)
        return self._finish(outcome, strategy=Strategy.federated, email=email)

    async def authenticate_bearer(self, token: str | None) -> Outcome:
        token_ref = fingerprint(token) if token else None
        if not self._strategies.bearer:
            outcome: Outcome = Rejected(RejectReason.strategy_disabled)
        else:
            outcome = await self._bearer.verify(token)
        return self._finish(outcome, strategy=Strategy.bearer, token=token_ref)

    async def establish_session(self, account: Account) -> str:
        return await self._sessions.establish(account)

    async def restore_session(self, reference: str | None) -> Outcome:
        outcome = await self._sessions.restore(reference)
        return self._finish(outcome, strategy=Strategy.session, reference=reference)

    def _finish(self, outcome: Outcome, *, strategy: Strategy, **context: Any) -> Outcome:
        outcome = self._admission.gate(outcome)
        if isinstance(outcome, Rejected):
            log.warning("auth.rejected", strategy=str(strategy), reason=str(outcome.reason), **context)
        elif isinstance(outcome, Errored):
            log.error(
                "auth.error",
                strategy=str(strategy),
                cause=str(outcome.cause),
                detail=outcome.detail,
                **context,
            )
        elif isinstance(outcome, Admitted):
            if outcome.via is None:
                outcome = replace(outcome, via=strategy)
            log.info("auth.admitted", strategy=str(outcome.via), account_id=outcome.account.id)
        return outcome


# --- Module Notes -----------------------------------------------------------
# Restore re-enters the admission policy inside `SessionLifecycleManager`; running the
# gate again in `_finish` is idempotent for the same account state.
