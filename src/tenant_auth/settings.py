"""
tenant_auth.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (session signing key, federated client secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process-wide configuration.

    Per-tenant security policy lives in the store; only the strategy registration
    and transport knobs are configured here.
    """

    model_config = SettingsConfigDict(env_prefix="TENANT_AUTH_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "tenant-auth"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Session reference signing (cookie transport)
    jwt_alg: str = "HS256"
    jwt_issuer: str = "tenant-auth"
    jwt_audience: str = "tenant-auth-session"
    jwt_secret: str = Field(default="dev-only-session-signing-key-change-me", repr=False)
    session_cookie_name: str = "tenant_auth_session"
    session_ttl_minutes: int = 12 * 60

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./tenant_auth.db"

    # Strategy registration
    local_password_enabled: bool = True
    bearer_enabled: bool = True
    directory_timeout_seconds: float = 10.0

    federated_client_id: str | None = None
    federated_client_secret: str | None = Field(default=None, repr=False)
    federated_issuer: str | None = None
    federated_callback_url: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tenant-scoped options (directory host, federated client id, ...) are NOT read from
# the environment; they are loaded per account through the identity store.
