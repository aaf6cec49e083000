"""
tenant_auth.auth.bearer

Bearer (integration API) token verifier.

Responsibilities:
- Resolve an opaque integration token to the tenant administrator it acts as.

Used per request by machine callers; nothing is cached between requests.
"""

from __future__ import annotations

from tenant_auth.auth.outcome import Admitted, ErrorCause, Errored, Outcome, Rejected, RejectReason
from tenant_auth.auth.store import IdentityStore, StoreError


class BearerTokenVerifier:
    def __init__(self, store: IdentityStore) -> None:
        self._store = store

    async def verify(self, token: str | None) -> Outcome:
        if not token or not token.strip():
            return Rejected(RejectReason.invalid_token)
        try:
            account = await self._store.find_account_by_session_token(token.strip())
        except StoreError as e:
            return Errored(ErrorCause.store_failure, str(e))
        if account is None:
            return Rejected(RejectReason.invalid_token)
        if not account.admin:
            return Rejected(RejectReason.not_administrator)
        return Admitted(account)
