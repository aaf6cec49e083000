"""
tenant_auth.auth.models

Auth domain models.

Responsibilities:
- Define the account and tenant-configuration shapes every verifier consumes.
- Define the session principal (`Principal`) injected into endpoints.
- Keep secrets out of reprs so they never reach a log line by accident.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True, slots=True)
class Account:
    """
    A user identity as loaded from the store.

    `active` is the admission flag; `activated` records that the first-login side
    effect has already run for this account.
    """

    id: int
    email: str
    tenant_id: int | None
    password_hash: str | None = field(default=None, repr=False)
    active: bool = True
    activated: bool = False
    admin: bool = False


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    host: str
    bind_template: str
    bind_dn: str | None = None
    bind_password: str | None = field(default=None, repr=False)
    search_base: str | None = None
    search_filter: str = "(mail={email})"

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> DirectoryConfig | None:
        if not raw or not raw.get("host"):
            return None
        return cls(
            host=str(raw["host"]),
            bind_template=str(raw.get("bind_template") or ""),
            bind_dn=raw.get("bind_dn") or None,
            bind_password=raw.get("bind_password") or None,
            search_base=raw.get("search_base") or None,
            search_filter=str(raw.get("search_filter") or "(mail={email})"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "bind_template": self.bind_template,
            "bind_dn": self.bind_dn,
            "bind_password": self.bind_password,
            "search_base": self.search_base,
            "search_filter": self.search_filter,
        }


@dataclass(frozen=True, slots=True)
class FederatedConfig:
    client_id: str
    issuer: str
    client_secret: str | None = field(default=None, repr=False)
    callback_url: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> FederatedConfig | None:
        if not raw or not raw.get("client_id"):
            return None
        return cls(
            client_id=str(raw["client_id"]),
            issuer=str(raw.get("issuer") or ""),
            client_secret=raw.get("client_secret") or None,
            callback_url=raw.get("callback_url") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_id": self.client_id,
            "issuer": self.issuer,
            "client_secret": self.client_secret,
            "callback_url": self.callback_url,
        }


@dataclass(frozen=True, slots=True)
class TenantConfig:
    """Per-tenant security policy."""

    tenant_id: int
    name: str
    directory_enabled: bool = False
    directory: DirectoryConfig | None = None
    federated_enabled: bool = False
    federated: FederatedConfig | None = None


def redacted_view(config: TenantConfig) -> dict[str, Any]:
    """
    The only outward read path for tenant security settings.

    Secrets are reported as `*_set` booleans; their values never leave the store.
    """

    directory = config.directory
    federated = config.federated
    return {
        "tenant_id": config.tenant_id,
        "directory": {
            "enabled": config.directory_enabled,
            "host": directory.host if directory else None,
            "bind_template": directory.bind_template if directory else None,
            "bind_dn": directory.bind_dn if directory else None,
            "bind_password_set": bool(directory and directory.bind_password),
            "search_base": directory.search_base if directory else None,
            "search_filter": directory.search_filter if directory else None,
        },
        "federated": {
            "enabled": config.federated_enabled,
            "client_id": federated.client_id if federated else None,
            "issuer": federated.issuer if federated else None,
            "callback_url": federated.callback_url if federated else None,
            "client_secret_set": bool(federated and federated.client_secret),
        },
    }


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, rebuilt from fresh account state on every request.
    """

    account_id: int
    email: str
    tenant_id: int | None
    admin: bool
    via: str

    @property
    def is_admin(self) -> bool:
        return self.admin

    @classmethod
    def from_account(cls, account: Account, *, via: str) -> Principal:
        return cls(
            account_id=account.id,
            email=account.email,
            tenant_id=account.tenant_id,
            admin=account.admin,
            via=via,
        )


# --- Module Notes -----------------------------------------------------------
# `Principal` is never persisted; the durable session reference is only the account id.
