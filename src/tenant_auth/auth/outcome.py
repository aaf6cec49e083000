"""
tenant_auth.auth.outcome

Verification outcome variants.

Responsibilities:
- Define the single tagged result every verifier returns: `Admitted`, `Rejected`, `Errored`.
- Define the closed sets of rejection reasons and error causes.

`Rejected` is user-attributable and never retried. `Errored` is an infrastructure
fault; callers may retry it, but must present both identically to the end user.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from tenant_auth.auth.models import Account


class RejectReason(enum.StrEnum):
    unknown_account = "unknown_account"
    bad_credential = "bad_credential"
    account_not_active = "account_not_active"
    no_tenant = "no_tenant"
    federation_disabled = "federation_disabled"
    directory_disabled = "directory_disabled"
    strategy_disabled = "strategy_disabled"
    invalid_token = "invalid_token"
    not_administrator = "not_administrator"
    session_invalid = "session_invalid"


class ErrorCause(enum.StrEnum):
    store_failure = "store_failure"
    directory_unreachable = "directory_unreachable"
    directory_misconfigured = "directory_misconfigured"
    corrupt_credential = "corrupt_credential"
    no_email_in_assertion = "no_email_in_assertion"
    missing_assertion = "missing_assertion"


@dataclass(frozen=True, slots=True)
class Admitted:
    account: Account
    # Strategy that produced the candidate; informational, ignored by equality.
    via: str | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectReason


@dataclass(frozen=True, slots=True)
class Errored:
    cause: ErrorCause
    detail: str | None = None


Outcome = Admitted | Rejected | Errored


# --- Module Notes -----------------------------------------------------------
# Verifiers return `Admitted` as a candidate only. `AuthenticationService._finish`
# runs it through the admission gate before any session is established.
