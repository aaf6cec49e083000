"""
tenant_auth.auth.sessions

Session lifecycle: serialize an admitted account to a durable reference and restore it.

Responsibilities:
- `establish`: run the first-login activation side effect once, then emit the account id.
- `restore`: reload the account by id and re-run the admission policy on fresh state.
"""

from __future__ import annotations

from tenant_auth.auth.admission import AdmissionPolicy
from tenant_auth.auth.models import Account
from tenant_auth.auth.outcome import ErrorCause, Errored, Outcome, Rejected, RejectReason
from tenant_auth.auth.store import AccountActivator, IdentityStore, StoreError
from tenant_auth.observability.logging import get_logger

log = get_logger(__name__)


class SessionLifecycleManager:
    def __init__(
        self,
        *,
        store: IdentityStore,
        activator: AccountActivator,
        admission: AdmissionPolicy | None = None,
    ) -> None:
        self._store = store
        self._activator = activator
        self._admission = admission or AdmissionPolicy()

    async def establish(self, account: Account) -> str:
        # `activated` flips once; later logins skip the collaborator entirely.
        if not account.activated:
            account = await self._activator.maybe_activate(account)
            log.info("session.first_login", account_id=account.id)
        # Only the primary key is durable; role flags are re-read on every restore.
        return str(account.id)

    async def restore(self, reference: str | None) -> Outcome:
        try:
            account_id = int(reference or "")
        except ValueError:
            return Rejected(RejectReason.session_invalid)

        try:
            account = await self._store.find_account_by_id(account_id)
        except StoreError as e:
            return Errored(ErrorCause.store_failure, str(e))
        if account is None:
            return Rejected(RejectReason.session_invalid)
        return self._admission.admit(account)


# --- Module Notes -----------------------------------------------------------
# How the reference travels (signed cookie) is the web layer's concern; see
# `tenant_auth.auth.jwt`.
