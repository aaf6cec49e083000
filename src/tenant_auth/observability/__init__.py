"""
tenant_auth.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The authentication audit signal is a log stream, not a table; it is emitted through
# the loggers configured here.
