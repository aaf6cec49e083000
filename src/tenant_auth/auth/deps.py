"""
tenant_auth.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Turn a bearer integration token or a session cookie into a typed `Principal`.
- Re-run session restore (and so the admission policy) on every request.
- Enforce administrator-only endpoints.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from tenant_auth.api.deps import auth_service, settings_dep
from tenant_auth.auth.jwt import JwtConfig, JwtValidationError, decode_session_token
from tenant_auth.auth.models import Principal
from tenant_auth.auth.outcome import Admitted
from tenant_auth.auth.resolver import Strategy
from tenant_auth.observability.logging import get_logger
from tenant_auth.services.authentication_service import AuthenticationService
from tenant_auth.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Same text for every failure so callers cannot enumerate accounts.
AUTH_FAILED = "Authentication failed"


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=AUTH_FAILED)


async def get_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    service: AuthenticationService = Depends(auth_service),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    # Machine callers: integration token, checked per request, never cached.
    if creds is not None and creds.credentials:
        outcome = await service.authenticate_bearer(creds.credentials)
        if not isinstance(outcome, Admitted):
            raise _unauthorized()
        return Principal.from_account(outcome.account, via=Strategy.bearer)

    cookie = request.cookies.get(settings.session_cookie_name)
    if not cookie:
        raise _unauthorized()
    try:
        reference = decode_session_token(cfg=JwtConfig.from_settings(settings), token=cookie)
    except JwtValidationError as e:
        log.info("session.cookie_invalid", error=str(e))
        raise _unauthorized() from e

    outcome = await service.restore_session(reference)
    if not isinstance(outcome, Admitted):
        raise _unauthorized()
    return Principal.from_account(outcome.account, via=Strategy.session)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Administrator required")
    return principal


# --- Module Notes -----------------------------------------------------------
# `Rejected` and `Errored` both surface as the same 401; the difference is only in logs.
