"""
tenant_auth.api.__main__

Entrypoint for running the service via `python -m tenant_auth.api`.
"""

from __future__ import annotations

import uvicorn

from tenant_auth.api.app import create_app
from tenant_auth.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # Trust X-Forwarded-* so audit events log the real client address behind a proxy.
        proxy_headers=True,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Run behind TLS termination in production: the session cookie is marked Secure
# when env=prod.
