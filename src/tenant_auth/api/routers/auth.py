"""
tenant_auth.api.routers.auth

Interactive login endpoints.

Responsibilities:
- Password login (resolver picks local or directory per tenant) and session cookie issue.
- Logout.
- Current principal lookup (cookie session or integration bearer token).
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from starlette.status import HTTP_204_NO_CONTENT, HTTP_401_UNAUTHORIZED

from tenant_auth.api.deps import auth_service, settings_dep
from tenant_auth.auth.deps import AUTH_FAILED, get_principal
from tenant_auth.auth.jwt import JwtConfig, issue_session_token
from tenant_auth.auth.models import Principal
from tenant_auth.auth.outcome import Admitted
from tenant_auth.auth.resolver import Strategy
from tenant_auth.auth.store import StoreError
from tenant_auth.observability.logging import get_logger
from tenant_auth.services.authentication_service import AuthenticationService
from tenant_auth.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(default="", max_length=1024, repr=False)


class PrincipalResponse(BaseModel):
    account_id: int
    email: str
    tenant_id: int | None
    admin: bool
    via: str

    @classmethod
    def of(cls, principal: Principal) -> PrincipalResponse:
        return cls(
            account_id=principal.account_id,
            email=principal.email,
            tenant_id=principal.tenant_id,
            admin=principal.admin,
            via=principal.via,
        )


@router.post("/login", response_model=PrincipalResponse)
async def login(
    body: LoginRequest,
    response: Response,
    service: AuthenticationService = Depends(auth_service),
    settings: Settings = Depends(settings_dep),
) -> PrincipalResponse:
    outcome = await service.authenticate_local(body.email, body.password)
    if not isinstance(outcome, Admitted):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=AUTH_FAILED)

    try:
        reference = await service.establish_session(outcome.account)
    except StoreError as e:
        log.error("session.establish_failed", account_id=outcome.account.id, error=str(e))
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=AUTH_FAILED) from e

    ttl = timedelta(minutes=settings.session_ttl_minutes)
    token = issue_session_token(cfg=JwtConfig.from_settings(settings), reference=reference, ttl=ttl)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=settings.env == "prod",
        samesite="lax",
    )
    principal = Principal.from_account(outcome.account, via=outcome.via or Strategy.local)
    return PrincipalResponse.of(principal)


@router.post("/logout", status_code=HTTP_204_NO_CONTENT)
async def logout(settings: Settings = Depends(settings_dep)) -> Response:
    response = Response(status_code=HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=PrincipalResponse)
async def me(principal: Principal = Depends(get_principal)) -> PrincipalResponse:
    return PrincipalResponse.of(principal)


# --- Module Notes -----------------------------------------------------------
# There is deliberately no federated callback route here: the identity-provider
# integration validates the assertion and calls `authenticate_federated` itself.
