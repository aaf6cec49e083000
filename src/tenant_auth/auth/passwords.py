"""
tenant_auth.auth.passwords

Local credential verification.

Responsibilities:
- Hash new secrets with Argon2id (salt and cost parameters are encoded in the hash).
- Verify a supplied secret against the stored hash in constant time.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from tenant_auth.auth.models import Account


class CorruptCredentialError(Exception):
    """The stored hash cannot be parsed; the account needs operator attention."""


class LocalCredentialVerifier:
    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher()

    def hash(self, secret: str) -> str:
        return self._hasher.hash(secret)

    def verify(self, account: Account, secret: str) -> bool:
        # Federation-only accounts have no hash: a password can never match.
        if not account.password_hash:
            return False
        try:
            # argon2 reads the salt/cost parameters from the stored hash itself.
            return self._hasher.verify(account.password_hash, secret)
        except VerifyMismatchError:
            return False
        except InvalidHashError as e:
            raise CorruptCredentialError(f"unparseable password hash for account {account.id}") from e
        except VerificationError as e:
            raise CorruptCredentialError(str(e)) from e


def hash_password(secret: str) -> str:
    return LocalCredentialVerifier().hash(secret)


# --- Module Notes -----------------------------------------------------------
# Password hashing is CPU-bound (~tens of ms); callers on the event loop should keep
# the number of concurrent local verifications bounded by their worker model.
