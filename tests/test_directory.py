"""
tests.test_directory

Directory delegation verifier and the blocking ldap3 bind.

Responsibilities:
- Timeout / unreachable map to `Errored(directory_unreachable)`; bind rejection to
  `Rejected(bad_credential)`.
- Connections are always unbound, including when the bind raises.
- Unusable tenant templates are `Errored(directory_misconfigured)`, never an anonymous bind.
"""

from __future__ import annotations

import time
from typing import Any

import pytest
from ldap3.core.exceptions import LDAPSocketOpenError

from tenant_auth.auth import directory as directory_module
from tenant_auth.auth.directory import (
    DirectoryDelegationVerifier,
    DirectoryMisconfiguredError,
    DirectoryUnavailableError,
    ldap_bind,
)
from tenant_auth.auth.models import Account, DirectoryConfig
from tenant_auth.auth.outcome import Admitted, ErrorCause, Errored, Rejected, RejectReason

CONFIG = DirectoryConfig(host="ldap://dir.t.com", bind_template="uid={email},ou=people,dc=t,dc=com")
ACCOUNT = Account(id=7, email="a@t.com", tenant_id=1)


@pytest.mark.asyncio
async def test_successful_bind_yields_candidate() -> None:
    seen: list[tuple[str, str, float]] = []

    def binder(config: DirectoryConfig, email: str, secret: str, *, timeout: float) -> bool:
        seen.append((email, secret, timeout))
        return True

    outcome = await DirectoryDelegationVerifier(timeout=2.0, binder=binder).verify(
        CONFIG, ACCOUNT, "pw"
    )
    assert outcome == Admitted(ACCOUNT)
    assert seen == [("a@t.com", "pw", 2.0)]


@pytest.mark.asyncio
async def test_rejected_bind_is_bad_credential() -> None:
    outcome = await DirectoryDelegationVerifier(
        timeout=1.0, binder=lambda *a, **kw: False
    ).verify(CONFIG, ACCOUNT, "pw")
    assert outcome == Rejected(RejectReason.bad_credential)


@pytest.mark.asyncio
async def test_hung_directory_times_out_as_unreachable() -> None:
    def slow(*_: Any, **__: Any) -> bool:
        time.sleep(0.5)
        return True

    outcome = await DirectoryDelegationVerifier(timeout=0.05, binder=slow).verify(
        CONFIG, ACCOUNT, "pw"
    )
    assert isinstance(outcome, Errored)
    assert outcome.cause is ErrorCause.directory_unreachable


@pytest.mark.asyncio
async def test_unavailable_directory_is_an_error_not_a_rejection() -> None:
    def down(*_: Any, **__: Any) -> bool:
        raise DirectoryUnavailableError("connection refused")

    outcome = await DirectoryDelegationVerifier(timeout=1.0, binder=down).verify(
        CONFIG, ACCOUNT, "pw"
    )
    assert outcome == Errored(ErrorCause.directory_unreachable, "connection refused")


@pytest.mark.asyncio
async def test_empty_secret_never_reaches_the_directory() -> None:
    calls: list[str] = []

    def binder(*_: Any, **__: Any) -> bool:
        calls.append("bind")
        return True

    outcome = await DirectoryDelegationVerifier(timeout=1.0, binder=binder).verify(
        CONFIG, ACCOUNT, ""
    )
    assert outcome == Rejected(RejectReason.bad_credential)
    assert calls == []


@pytest.mark.asyncio
async def test_missing_directory_config_is_misconfiguration() -> None:
    outcome = await DirectoryDelegationVerifier(timeout=1.0).verify(None, ACCOUNT, "pw")
    assert isinstance(outcome, Errored)
    assert outcome.cause is ErrorCause.directory_misconfigured


class FakeServer:
    def __init__(self, host: str, **_: Any) -> None:
        self.host = host


class FakeConnection:
    instances: list[FakeConnection] = []
    behaviour: dict[str | None, Any] = {}
    search_response: list[dict[str, Any]] = []

    def __init__(self, server: FakeServer, *, user: str | None, password: str | None, **_: Any):
        self.user = user
        self.password = password
        self.unbound = False
        self.result: dict[str, Any] = {}
        self.response: list[dict[str, Any]] = []
        FakeConnection.instances.append(self)

    def bind(self) -> bool:
        action = FakeConnection.behaviour.get(self.user, True)
        if isinstance(action, BaseException):
            raise action
        if isinstance(action, int):
            self.result = {"result": action}
            return False
        return bool(action)

    def search(self, base: str, query: str, **_: Any) -> bool:
        self.query = query
        self.response = FakeConnection.search_response
        return bool(self.response)

    def unbind(self) -> None:
        self.unbound = True


@pytest.fixture
def fake_ldap(monkeypatch: pytest.MonkeyPatch) -> type[FakeConnection]:
    FakeConnection.instances = []
    FakeConnection.behaviour = {}
    FakeConnection.search_response = []
    monkeypatch.setattr(directory_module.ldap3, "Server", FakeServer)
    monkeypatch.setattr(directory_module.ldap3, "Connection", FakeConnection)
    return FakeConnection


def test_ldap_bind_formats_dn_and_unbinds(fake_ldap: type[FakeConnection]) -> None:
    assert ldap_bind(CONFIG, "a@t.com", "pw", timeout=1.0) is True
    (conn,) = fake_ldap.instances
    assert conn.user == "uid=a@t.com,ou=people,dc=t,dc=com"
    assert conn.unbound


def test_ldap_bind_invalid_credentials_is_false(fake_ldap: type[FakeConnection]) -> None:
    fake_ldap.behaviour["uid=a@t.com,ou=people,dc=t,dc=com"] = 49
    assert ldap_bind(CONFIG, "a@t.com", "pw", timeout=1.0) is False
    assert fake_ldap.instances[0].unbound


def test_ldap_bind_busy_server_is_unavailable(fake_ldap: type[FakeConnection]) -> None:
    fake_ldap.behaviour["uid=a@t.com,ou=people,dc=t,dc=com"] = 51
    with pytest.raises(DirectoryUnavailableError):
        ldap_bind(CONFIG, "a@t.com", "pw", timeout=1.0)
    assert fake_ldap.instances[0].unbound


def test_ldap_bind_unbinds_when_bind_raises(fake_ldap: type[FakeConnection]) -> None:
    fake_ldap.behaviour["uid=a@t.com,ou=people,dc=t,dc=com"] = LDAPSocketOpenError("refused")
    with pytest.raises(DirectoryUnavailableError):
        ldap_bind(CONFIG, "a@t.com", "pw", timeout=1.0)
    assert fake_ldap.instances[0].unbound


def test_search_then_bind(fake_ldap: type[FakeConnection]) -> None:
    config = DirectoryConfig(
        host="ldap://dir.t.com",
        bind_template="",
        bind_dn="cn=svc,dc=t,dc=com",
        bind_password="svc-pw",
        search_base="dc=t,dc=com",
        search_filter="(mail={email})",
    )
    fake_ldap.search_response = [{"type": "searchResEntry", "dn": "cn=Alice,dc=t,dc=com"}]

    assert ldap_bind(config, "a@t.com", "pw", timeout=1.0) is True

    service, user = fake_ldap.instances
    assert service.user == "cn=svc,dc=t,dc=com"
    assert service.query == "(mail=a@t.com)"
    assert user.user == "cn=Alice,dc=t,dc=com"
    assert user.password == "pw"
    assert service.unbound and user.unbound


def test_search_without_match_is_a_rejection(fake_ldap: type[FakeConnection]) -> None:
    config = DirectoryConfig(
        host="ldap://dir.t.com",
        bind_template="",
        bind_dn="cn=svc,dc=t,dc=com",
        bind_password="svc-pw",
        search_base="dc=t,dc=com",
    )
    assert ldap_bind(config, "a@t.com", "pw", timeout=1.0) is False
    assert len(fake_ldap.instances) == 1
    assert fake_ldap.instances[0].unbound


@pytest.mark.parametrize("template", ["uid={email},ou={dept}", "uid={email}}", "uid={0},{email}"])
def test_ldap_bind_unusable_template_is_misconfiguration(
    fake_ldap: type[FakeConnection], template: str
) -> None:
    config = DirectoryConfig(host="ldap://dir.t.com", bind_template=template)
    with pytest.raises(DirectoryMisconfiguredError):
        ldap_bind(config, "a@t.com", "pw", timeout=1.0)
    assert fake_ldap.instances == []


def test_ldap_bind_refuses_empty_dn(fake_ldap: type[FakeConnection]) -> None:
    config = DirectoryConfig(host="ldap://dir.t.com", bind_template="")
    with pytest.raises(DirectoryMisconfiguredError):
        ldap_bind(config, "a@t.com", "pw", timeout=1.0)
    # The fake accepts any bind, anonymous included; none may be attempted.
    assert fake_ldap.instances == []


def test_unusable_search_filter_is_misconfiguration(fake_ldap: type[FakeConnection]) -> None:
    config = DirectoryConfig(
        host="ldap://dir.t.com",
        bind_template="",
        bind_dn="cn=svc,dc=t,dc=com",
        bind_password="svc-pw",
        search_base="dc=t,dc=com",
        search_filter="(&(mail={email})(ou={dept}))",
    )
    with pytest.raises(DirectoryMisconfiguredError):
        ldap_bind(config, "a@t.com", "pw", timeout=1.0)
    (service,) = fake_ldap.instances
    assert service.unbound


@pytest.mark.asyncio
async def test_verify_maps_unusable_template_to_error(fake_ldap: type[FakeConnection]) -> None:
    config = DirectoryConfig(host="ldap://dir.t.com", bind_template="uid={email},ou={dept}")
    outcome = await DirectoryDelegationVerifier(timeout=1.0).verify(config, ACCOUNT, "pw")
    assert isinstance(outcome, Errored)
    assert outcome.cause is ErrorCause.directory_misconfigured


@pytest.mark.asyncio
async def test_host_without_template_or_search_base_never_binds(
    fake_ldap: type[FakeConnection],
) -> None:
    config = DirectoryConfig.from_dict({"host": "ldap://dir.t.com"})

    outcome = await DirectoryDelegationVerifier(timeout=1.0).verify(
        config, ACCOUNT, "any-wrong-password"
    )

    assert isinstance(outcome, Errored)
    assert outcome.cause is ErrorCause.directory_misconfigured
    assert fake_ldap.instances == []
