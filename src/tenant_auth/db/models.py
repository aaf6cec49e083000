"""
tenant_auth.db.models

Persistence schema consumed by the authentication core.

Responsibilities:
- Define ORM models for tenants (companies) and their accounts:
  - Tenant: security policy (directory/federated flags + JSON parameters, integration API)
  - Account: identity, credential hash, activation and role flags
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_auth.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    directory_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    directory_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    federated_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    federated_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    integration_api_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    integration_api_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, unique=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    accounts: Mapped[list[Account]] = relationship(back_populates="tenant")


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Unique across the whole system, not per tenant; always stored lowercased.
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(512), nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    activated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    tenant: Mapped[Tenant | None] = relationship(back_populates="accounts")


# --- Module Notes -----------------------------------------------------------
# Secrets in `directory_config` / `federated_config` are read back only through
# `tenant_auth.auth.models.redacted_view` on any outward path.
