"""JSON-RPC client for the INWX Domrobot API."""

from __future__ import annotations

import base64
import hashlib
import hmac
import struct
import time
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError

from dnssecsync.adapters.http_client import HttpClient
from dnssecsync.config.inwx import get_inwx_config
from dnssecsync.domain.errors import ApiConnectionError, ProviderOperationError

from .schema import ListKeysResponse, LoginData, RpcResponse
from .translator import parse_remote_key

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from dnssecsync.config.http import HttpClientConfig
    from dnssecsync.config.inwx import InwxConfig
    from dnssecsync.domain.keys import RemoteKey
    from dnssecsync.domain.ports.registrar import PublishRequest

log = getLogger(__name__)

COLLABORATOR = "INWX"
TOTP_PERIOD_SECONDS = 30
TOTP_DIGITS = 6


def totp(secret: str, *, at: float) -> str:
    """RFC 6238 one-time password (SHA-1, 30 s period, 6 digits) for ``secret``."""

    normalized = secret.replace(" ", "").upper()
    key = base64.b32decode(normalized + "=" * (-len(normalized) % 8))
    counter = struct.pack(">Q", int(at) // TOTP_PERIOD_SECONDS)
    digest = hmac.new(key, counter, hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    value = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(value % 10**TOTP_DIGITS).zfill(TOTP_DIGITS)


def _log_response_body(response: httpx.Response) -> None:
    response.read()
    log.debug("INWX response %s: %s", response.status_code, response.text)


def _default_client_factory(config: HttpClientConfig) -> HttpClient:
    return HttpClient(config)


class InwxRegistrar:
    """Registrar session against INWX.

    Use as a context manager: entering logs in (unlocking 2FA accounts with a TOTP
    from the shared secret), leaving logs out and closes the transport on every
    exit path.
    """

    def __init__(
        self,
        *,
        config: InwxConfig | None = None,
        client_factory: Callable[[HttpClientConfig], HttpClient] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or get_inwx_config()
        self._client_factory = client_factory or _default_client_factory
        self._clock = clock
        self._client: HttpClient | None = None

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def endpoint(self) -> str:
        base_url = self._config.http.base_url
        if base_url is None:
            raise ApiConnectionError("Missing INWX endpoint URL", collaborator=COLLABORATOR)
        return base_url

    def open(self) -> None:
        if self._client is not None:
            return
        http_config = self._config.http
        if self._config.debug:
            http_config = replace(
                http_config,
                response_hooks=(*http_config.response_hooks, _log_response_body),
            )
        log.info("Connecting to INWX API (%s)", self._config.system)
        self._client = self._client_factory(http_config)
        try:
            self._login()
        except BaseException:
            self._client.close()
            self._client = None
            raise
        log.info("INWX API connected")

    def close(self) -> None:
        client = self._client
        if client is None:
            return
        try:
            response = self._call("account.logout")
            if not response.success:
                log.warning("INWX logout answered [%s] %s", response.code, response.message)
        except ApiConnectionError as exc:
            log.warning("INWX logout failed: %s", exc)
        finally:
            client.close()
            self._client = None
        log.info("INWX API disconnected")

    def list_keys(self) -> list[RemoteKey]:
        payload = self._call_raw("dnssec.listkeys")
        try:
            response = ListKeysResponse.model_validate(payload)
        except ValidationError as exc:
            raise ProviderOperationError(f"Unexpected dnssec.listkeys payload: {exc}") from exc
        self._require_success("dnssec.listkeys", response)
        return [parse_remote_key(key) for key in response.res_data]

    def add_key(self, request: PublishRequest) -> None:
        response = self._call(
            "dnssec.adddnskey",
            {
                "domainName": request.domain_name,
                "dnskey": request.dnskey,
                "ds": request.ds,
                "calculateDigest": False,
            },
        )
        self._require_success("dnssec.adddnskey", response)

    def delete_key(self, key_id: str) -> None:
        response = self._call("dnssec.deletednskey", {"key": key_id})
        self._require_success("dnssec.deletednskey", response)

    def _login(self) -> None:
        response = self._call(
            "account.login",
            {"user": self._config.user, "pass": self._config.password, "lang": "en"},
        )
        if not response.success:
            raise ApiConnectionError(
                f"INWX login failed: {response.message}",
                collaborator=COLLABORATOR,
                code=response.code,
            )
        login = LoginData.model_validate(response.res_data or {})
        if not login.requires_unlock:
            return
        if not self._config.shared_secret:
            raise ApiConnectionError(
                "INWX account requires two-factor unlock but INWX_API_SECRET is not set",
                collaborator=COLLABORATOR,
            )
        unlocked = self._call(
            "account.unlock",
            {"tan": totp(self._config.shared_secret, at=self._clock())},
        )
        if not unlocked.success:
            raise ApiConnectionError(
                f"INWX two-factor unlock failed: {unlocked.message}",
                collaborator=COLLABORATOR,
                code=unlocked.code,
            )

    def _call(self, method: str, params: Mapping[str, object] | None = None) -> RpcResponse:
        payload = self._call_raw(method, params)
        try:
            return RpcResponse.model_validate(payload)
        except ValidationError as exc:
            raise ApiConnectionError(
                f"Unexpected INWX response to {method}", collaborator=COLLABORATOR
            ) from exc

    def _call_raw(self, method: str, params: Mapping[str, object] | None = None) -> object:
        client = self._client
        if client is None:
            raise ApiConnectionError("INWX session is not open", collaborator=COLLABORATOR)
        log.debug("INWX call %s", method)
        try:
            response = client.post(self.endpoint, json={"method": method, "params": dict(params or {})})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise ApiConnectionError(
                f"INWX request {method} failed: {exc}", collaborator=COLLABORATOR
            ) from exc
        except ValueError as exc:
            raise ApiConnectionError(
                f"INWX answered {method} with invalid JSON", collaborator=COLLABORATOR
            ) from exc

    @staticmethod
    def _require_success(method: str, response: RpcResponse) -> None:
        if not response.success:
            log.error("INWX API error %s on %s: %s", response.code, method, response.message)
            raise ProviderOperationError(response.message, code=response.code)
