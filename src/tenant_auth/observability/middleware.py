"""
tenant_auth.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs.
- Mark authentication and tenant-security responses as uncacheable.
- Bind request metadata (including the caller address) into structlog contextvars so
  every `auth.rejected` / `auth.error` event can be traced back to a request.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# Responses under these prefixes carry credentials or principal data.
NO_STORE_PREFIXES = ("/v1/auth/", "/v1/tenant/authentication/")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request has a request id
    - Binds request-scoped contextvars for structured logs
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        # Prefer a caller-provided request id for trace continuity; otherwise generate one.
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            client=request.client.host if request.client else None,
        )
        try:
            response: Response = await call_next(request)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers["cache-control"] = "no-store"
        return response


# --- Module Notes -----------------------------------------------------------
# Authentication attempts are logged from the service layer; this middleware only
# supplies the request metadata those audit events are enriched with.
