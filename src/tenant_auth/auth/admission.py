"""
tenant_auth.auth.admission

Session admission policy.

Responsibilities:
- Be the one gate every candidate account passes before it becomes (or stays) a session.
"""

from __future__ import annotations

from tenant_auth.auth.models import Account
from tenant_auth.auth.outcome import Admitted, Outcome, Rejected, RejectReason


class AdmissionPolicy:
    """
    Rules, in order:
    1. active accounts are admitted;
    2. inactive administrators are admitted (they may need to fix tenant configuration);
    3. everyone else is rejected with `account_not_active`.
    """

    def admit(self, account: Account) -> Outcome:
        if account.active:
            return Admitted(account)
        if account.admin:
            return Admitted(account)
        return Rejected(RejectReason.account_not_active)

    def gate(self, outcome: Outcome) -> Outcome:
        # Non-admitted outcomes pass through untouched.
        if isinstance(outcome, Admitted):
            verdict = self.admit(outcome.account)
            return outcome if isinstance(verdict, Admitted) else verdict
        return outcome


# --- Module Notes -----------------------------------------------------------
# The same policy runs on session restore with freshly loaded account state, so
# deactivation takes effect on the next request.
