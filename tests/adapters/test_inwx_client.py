from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from dnssecsync.adapters.http_client import HttpClient
from dnssecsync.adapters.inwx import InwxRegistrar, parse_remote_key, totp
from dnssecsync.config.http import HttpClientConfig
from dnssecsync.config.inwx import INWX_ENDPOINTS, InwxConfig, InwxSystem
from dnssecsync.domain.errors import ApiConnectionError, ProviderOperationError
from dnssecsync.domain.ports.registrar import PublishRequest

RFC6238_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def _config(*, secret: str | None = None, debug: bool = False) -> InwxConfig:
    return InwxConfig(
        user="api-user",
        password="api-pass",
        shared_secret=secret,
        debug=debug,
        http=HttpClientConfig(name="inwx", base_url=INWX_ENDPOINTS[InwxSystem.LIVE]),
    )


class RpcRecorder:
    """Mock Domrobot endpoint answering from a per-method table."""

    def __init__(self, answers: dict[str, dict[str, object]]) -> None:
        self.answers = answers
        self.calls: list[tuple[str, dict[str, object]]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append((method, body["params"]))
        answer = self.answers.get(method, {"code": 1000, "msg": "Command completed successfully"})
        return httpx.Response(200, json=answer)

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[HttpClientConfig], HttpClient]:
    def factory(config: HttpClientConfig) -> HttpClient:
        return HttpClient(config, transport=httpx.MockTransport(handler))

    return factory


def _registrar(recorder: RpcRecorder, **config: object) -> InwxRegistrar:
    return InwxRegistrar(
        config=_config(**config),  # type: ignore[arg-type]
        client_factory=_make_client_factory(recorder.handler),
        clock=lambda: 59.0,
    )


def _key_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "ownerName": "example.com",
        "id": 9,
        "domainId": 77,
        "keyTag": "1039",
        "flagId": "257",
        "algorithmId": "13",
        "publicKey": "AAE=",
        "digestTypeId": "2",
        "digest": "AB" * 32,
        "created": "2024-01-01 10:00:00",
        "status": "OK",
        "active": 1,
    }
    payload.update(overrides)
    return payload


def test_totp_matches_rfc6238_vectors() -> None:
    assert totp(RFC6238_SECRET, at=59) == "287082"
    assert totp(RFC6238_SECRET, at=1111111109) == "081804"
    assert totp(RFC6238_SECRET, at=1111111111) == "050471"
    assert totp(RFC6238_SECRET, at=1234567890) == "005924"
    assert totp(RFC6238_SECRET, at=2000000000) == "279037"
    assert totp(RFC6238_SECRET, at=20000000000) == "353130"


def test_session_logs_in_and_out() -> None:
    recorder = RpcRecorder({"account.login": {"code": 1000, "resData": {"tfa": "0"}}})

    with _registrar(recorder):
        pass

    assert recorder.methods == ["account.login", "account.logout"]
    assert recorder.calls[0][1] == {"user": "api-user", "pass": "api-pass", "lang": "en"}


def test_two_factor_login_unlocks_with_totp() -> None:
    recorder = RpcRecorder({"account.login": {"code": 1000, "resData": {"tfa": "GOOGLE-AUTH"}}})

    with _registrar(recorder, secret=RFC6238_SECRET):
        pass

    assert recorder.methods == ["account.login", "account.unlock", "account.logout"]
    assert recorder.calls[1][1] == {"tan": "287082"}


def test_two_factor_login_without_secret_fails_and_closes() -> None:
    recorder = RpcRecorder({"account.login": {"code": 1000, "resData": {"tfa": "GOOGLE-AUTH"}}})
    registrar = _registrar(recorder)

    with pytest.raises(ApiConnectionError, match="INWX_API_SECRET"), registrar:
        pass

    assert recorder.methods == ["account.login"]


def test_rejected_login_raises_connection_error() -> None:
    recorder = RpcRecorder({"account.login": {"code": 2200, "msg": "Authentication error"}})

    with pytest.raises(ApiConnectionError) as excinfo, _registrar(recorder):
        pass

    assert excinfo.value.code == 2200
    assert excinfo.value.collaborator == "INWX"


def test_transport_failure_raises_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    registrar = InwxRegistrar(config=_config(), client_factory=_make_client_factory(handler))

    with pytest.raises(ApiConnectionError, match="account.login"), registrar:
        pass


def test_http_error_status_raises_connection_error() -> None:
    registrar = InwxRegistrar(
        config=_config(),
        client_factory=_make_client_factory(lambda _request: httpx.Response(503)),
    )

    with pytest.raises(ApiConnectionError), registrar:
        pass


def test_list_keys_translates_payloads() -> None:
    recorder = RpcRecorder(
        {
            "dnssec.listkeys": {
                "code": 1000,
                "resData": [_key_payload(), _key_payload(id="10", status="DELETED")],
            }
        }
    )

    with _registrar(recorder) as registrar:
        keys = registrar.list_keys()

    assert [key.key_id for key in keys] == ["9", "10"]
    first = keys[0]
    assert first.origin == "example.com."
    assert (first.flags, first.algorithm, first.key_tag, first.digest_type) == (257, 13, 1039, 2)
    assert first.domain_id == "77"
    assert keys[1].is_deleted


def test_list_keys_without_keys_returns_empty() -> None:
    recorder = RpcRecorder({"dnssec.listkeys": {"code": 1000}})

    with _registrar(recorder) as registrar:
        assert registrar.list_keys() == []


def test_list_keys_error_code_raises() -> None:
    recorder = RpcRecorder({"dnssec.listkeys": {"code": 2400, "msg": "Command failed"}})

    with _registrar(recorder) as registrar, pytest.raises(ProviderOperationError) as excinfo:
        registrar.list_keys()

    assert excinfo.value.code == 2400
    assert recorder.methods[-1] == "account.logout"


def test_add_key_sends_records_without_digest_calculation() -> None:
    recorder = RpcRecorder({})
    request = PublishRequest(
        domain_name="example.com",
        dnskey="example.com. IN DNSKEY 257 3 13 AAE=",
        ds="example.com. IN DS 1039 13 2 ABCD",
    )

    with _registrar(recorder) as registrar:
        registrar.add_key(request)

    assert recorder.calls[1] == (
        "dnssec.adddnskey",
        {
            "domainName": "example.com",
            "dnskey": "example.com. IN DNSKEY 257 3 13 AAE=",
            "ds": "example.com. IN DS 1039 13 2 ABCD",
            "calculateDigest": False,
        },
    )


def test_delete_key_failure_carries_code_and_message() -> None:
    recorder = RpcRecorder(
        {"dnssec.deletednskey": {"code": 2303, "msg": "Object does not exist", "reason": "key 9"}}
    )

    with _registrar(recorder) as registrar, pytest.raises(ProviderOperationError) as excinfo:
        registrar.delete_key("9")

    assert recorder.calls[1] == ("dnssec.deletednskey", {"key": "9"})
    assert excinfo.value.code == 2303
    assert excinfo.value.message == "Object does not exist (key 9)"


def test_failed_logout_still_closes_session() -> None:
    recorder = RpcRecorder({"account.logout": {"code": 2500, "msg": "Logout failed"}})
    registrar = _registrar(recorder)

    with registrar:
        pass

    with pytest.raises(ApiConnectionError, match="not open"):
        registrar.delete_key("9")


def test_debug_mode_keeps_session_working() -> None:
    recorder = RpcRecorder({"dnssec.listkeys": {"code": 1000, "resData": [_key_payload()]}})

    with _registrar(recorder, debug=True) as registrar:
        assert len(registrar.list_keys()) == 1


def test_parse_remote_key_accepts_numeric_strings() -> None:
    key = parse_remote_key(_key_payload(id="12", created=""))

    assert key.key_id == "12"
    assert key.created is None
    assert key.active is True
