"""
tenant_auth.auth.jwt

Signed transport for the session reference.

Responsibilities:
- Wrap the opaque session reference (account id) in a short-lived HS256 JWT for the cookie.
- Decode and validate it with strict claim requirements (iss/aud/exp/iat/sub).

Only `sub` carries data; role flags are never embedded, so a stolen cookie cannot
replay stale privileges.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from tenant_auth.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


class JwtValidationError(Exception):
    pass


def issue_session_token(
    *,
    cfg: JwtConfig,
    reference: str,
    ttl: timedelta = timedelta(hours=12),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": reference,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_session_token(*, cfg: JwtConfig, token: str) -> str:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e
    return str(payload["sub"])


# --- Module Notes -----------------------------------------------------------
# The decoded reference still goes through `SessionLifecycleManager.restore`; a valid
# signature alone never admits a caller.
