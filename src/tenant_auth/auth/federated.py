"""
tenant_auth.auth.federated

Federated identity verifier.

Responsibilities:
- Extract a usable email from an identity-provider profile assertion.
- Resolve it to a local account and its tenant.
- Require the tenant to have federated login enabled.

Signature/token validation is done by the identity-provider integration before this
verifier is called; no raw secret is ever handled here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tenant_auth.auth.models import normalize_email
from tenant_auth.auth.outcome import Admitted, ErrorCause, Errored, Outcome, Rejected, RejectReason
from tenant_auth.auth.store import IdentityStore, StoreError
from tenant_auth.observability.logging import get_logger

log = get_logger(__name__)

PRIMARY_IDENTIFIER_KEY = "upn"
DIRECT_EMAIL_KEY = "email"
NESTED_PROFILE_KEY = "_json"


def _non_empty(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_email(profile: Mapping[str, Any]) -> str | None:
    """
    First non-empty of: primary identifier, direct email, nested profile email.
    """

    nested = profile.get(NESTED_PROFILE_KEY)
    candidates = (
        profile.get(PRIMARY_IDENTIFIER_KEY),
        profile.get(DIRECT_EMAIL_KEY),
        nested.get(DIRECT_EMAIL_KEY) if isinstance(nested, Mapping) else None,
    )
    for candidate in candidates:
        email = _non_empty(candidate)
        if email is not None:
            return normalize_email(email)
    return None


class FederatedIdentityVerifier:
    def __init__(self, store: IdentityStore) -> None:
        self._store = store

    async def verify(self, profile: Mapping[str, Any] | None) -> Outcome:
        if not profile or not isinstance(profile, Mapping):
            return Errored(ErrorCause.missing_assertion, "no profile was provided")

        email = extract_email(profile)
        if email is None:
            return Errored(ErrorCause.no_email_in_assertion, "no email found in profile")

        try:
            account = await self._store.find_account_by_email(email)
            if account is None:
                return Rejected(RejectReason.unknown_account)
            tenant = await self._store.load_tenant_config(account)
        except StoreError as e:
            return Errored(ErrorCause.store_failure, str(e))

        if tenant is None:
            return Rejected(RejectReason.no_tenant)
        if not tenant.federated_enabled:
            log.info("federated.disabled_for_tenant", email=email, tenant=tenant.name)
            return Rejected(RejectReason.federation_disabled)
        return Admitted(account)


# --- Module Notes -----------------------------------------------------------
# The returned `Admitted` is a candidate; `AuthenticationService` runs the admission
# policy on it before anything session-related happens.
