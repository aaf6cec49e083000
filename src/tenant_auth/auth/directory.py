"""
tenant_auth.auth.directory

Directory (LDAP) delegation verifier.

Responsibilities:
- Bind against the tenant's directory with the supplied credential pair.
- Scope every connection to a single attempt and always unbind it.
- Keep the blocking ldap3 round trip off the event loop and bounded by a timeout.
- Tell "wrong password" apart from "directory down" in both outcome and logs.

No retries happen here: a failed bind is surfaced immediately.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import ldap3
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars
from ldap3.utils.dn import escape_rdn

from tenant_auth.auth.models import Account, DirectoryConfig
from tenant_auth.auth.outcome import Admitted, ErrorCause, Errored, Outcome, Rejected, RejectReason
from tenant_auth.observability.logging import get_logger

log = get_logger(__name__)

# busy / unavailable: the directory answered but cannot judge the credential.
_UNAVAILABLE_RESULT_CODES = frozenset({51, 52})


class DirectoryUnavailableError(Exception):
    pass


class DirectoryMisconfiguredError(Exception):
    pass


Binder = Callable[..., bool]


def render_template(template: str, email: str) -> str:
    """
    Substitute the (already escaped) email into a bind DN template or search filter.

    Only the `{email}` placeholder is allowed; any other field, positional slot or
    unbalanced brace raises `DirectoryMisconfiguredError`.
    """

    try:
        return template.format(email=email)
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise DirectoryMisconfiguredError(f"unusable template {template!r}: {e!r}") from e


@contextmanager
def _connection(
    server: ldap3.Server, *, user: str | None, password: str | None, timeout: float
) -> Iterator[ldap3.Connection]:
    conn = ldap3.Connection(
        server,
        user=user,
        password=password,
        receive_timeout=timeout,
        read_only=True,
        raise_exceptions=False,
    )
    try:
        yield conn
    finally:
        try:
            conn.unbind()
        except LDAPException as e:
            # The outcome is already decided; an unbind failure must not change it.
            log.warning("directory.unbind_failed", host=server.host, error=str(e))


def _check_bind(conn: ldap3.Connection) -> bool:
    if conn.bind():
        return True
    code = (conn.result or {}).get("result")
    if code in _UNAVAILABLE_RESULT_CODES:
        raise DirectoryUnavailableError(f"directory refused bind with result {code}")
    return False


def _search_user_dn(
    server: ldap3.Server, config: DirectoryConfig, email: str, timeout: float
) -> str | None:
    with _connection(
        server, user=config.bind_dn, password=config.bind_password, timeout=timeout
    ) as conn:
        if not _check_bind(conn):
            raise DirectoryUnavailableError("service account bind rejected")
        query = render_template(config.search_filter, escape_filter_chars(email))
        conn.search(config.search_base, query, search_scope=ldap3.SUBTREE, attributes=[])
        for entry in conn.response or []:
            if entry.get("type") == "searchResEntry":
                return entry["dn"]
    return None


def ldap_bind(config: DirectoryConfig, email: str, secret: str, *, timeout: float) -> bool:
    """
    Blocking bind used by `DirectoryDelegationVerifier`.

    Returns True on a successful bind, False when the directory rejects the
    credential, raises `DirectoryMisconfiguredError` when the tenant config cannot
    produce a bind DN and `DirectoryUnavailableError` for anything else.
    """

    try:
        server = ldap3.Server(config.host, connect_timeout=timeout, get_info=ldap3.NONE)
        if config.search_base:
            user_dn = _search_user_dn(server, config, email, timeout)
            if user_dn is None:
                return False
        else:
            user_dn = render_template(config.bind_template, escape_rdn(email))
        if not user_dn:
            # An empty DN is an anonymous bind, which many servers accept for any password.
            raise DirectoryMisconfiguredError("bind DN resolved to an empty string")
        with _connection(server, user=user_dn, password=secret, timeout=timeout) as conn:
            return _check_bind(conn)
    except LDAPException as e:
        raise DirectoryUnavailableError(str(e)) from e


class DirectoryDelegationVerifier:
    def __init__(self, *, timeout: float, binder: Binder = ldap_bind) -> None:
        self._timeout = timeout
        self._binder = binder

    async def verify(
        self, config: DirectoryConfig | None, account: Account, secret: str
    ) -> Outcome:
        email = account.email
        if config is None or not config.host:
            log.error("directory.misconfigured", email=email, tenant_id=account.tenant_id)
            return Errored(ErrorCause.directory_misconfigured, "no directory host configured")
        if not config.search_base and not config.bind_template:
            log.error("directory.misconfigured", email=email, host=config.host, template=False)
            return Errored(ErrorCause.directory_misconfigured, "no bind template or search base")

        # An empty password is an anonymous bind on most servers; never send one.
        if not secret:
            log.warning("directory.bind_rejected", email=email, host=config.host, empty=True)
            return Rejected(RejectReason.bad_credential)

        try:
            ok = await asyncio.wait_for(
                asyncio.to_thread(self._binder, config, email, secret, timeout=self._timeout),
                timeout=self._timeout,
            )
        except TimeoutError:
            log.error("directory.unreachable", email=email, host=config.host, timeout=True)
            return Errored(ErrorCause.directory_unreachable, f"timed out after {self._timeout}s")
        except DirectoryUnavailableError as e:
            log.error("directory.unreachable", email=email, host=config.host, error=str(e))
            return Errored(ErrorCause.directory_unreachable, str(e))
        except DirectoryMisconfiguredError as e:
            log.error("directory.misconfigured", email=email, host=config.host, error=str(e))
            return Errored(ErrorCause.directory_misconfigured, str(e))

        if not ok:
            log.warning("directory.bind_rejected", email=email, host=config.host)
            return Rejected(RejectReason.bad_credential)
        return Admitted(account)


# --- Module Notes -----------------------------------------------------------
# No connection pooling: host and credentials vary per tenant and per call.
# On timeout the worker thread is abandoned; ldap3's own connect/receive timeouts
# (same bound) make it finish and unbind shortly after.
