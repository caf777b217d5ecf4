"""ISPConfig JSON remoting client used as the local key source."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from pydantic import ValidationError

from dnssecsync.adapters.http_client import HttpClient
from dnssecsync.config.ispconfig import get_ispconfig_config
from dnssecsync.domain.errors import ApiConnectionError, ControlPlaneError
from dnssecsync.domain.ports.control_plane import ZoneSnapshot

from .schema import (
    RemoteResponse,
    ServerPayload,
    parse_client_ids,
    parse_server_functions,
    parse_zone,
    parse_zone_summaries,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from dnssecsync.config.http import HttpClientConfig
    from dnssecsync.config.ispconfig import IspConfigConfig

log = getLogger(__name__)

COLLABORATOR = "ISPConfig"


def _default_client_factory(config: HttpClientConfig) -> HttpClient:
    return HttpClient(config)


class IspConfigControlPlane:
    """Remote API session against an ISPConfig master.

    Every call is a ``POST <remote_uri>?<method>`` with a JSON body carrying the
    session id obtained at login.
    """

    def __init__(
        self,
        *,
        config: IspConfigConfig | None = None,
        client_factory: Callable[[HttpClientConfig], HttpClient] | None = None,
    ) -> None:
        self._config = config or get_ispconfig_config()
        self._client_factory = client_factory or _default_client_factory
        self._client: HttpClient | None = None
        self._session_id: str | None = None

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

    def open(self) -> None:
        if self._client is not None:
            return
        log.info("Connecting to ISPConfig Remote API")
        self._client = self._client_factory(self._config.http)
        try:
            response = self._call(
                "login",
                {"username": self._config.user, "password": self._config.password},
            )
            if not response.success or not response.response:
                raise ApiConnectionError(
                    f"ISPConfig login failed: {response.message}",
                    collaborator=COLLABORATOR,
                    code=response.code,
                )
            self._session_id = str(response.response)
        except BaseException:
            self._client.close()
            self._client = None
            raise
        log.info("ISPConfig Remote API connected")

    def close(self) -> None:
        client = self._client
        if client is None:
            return
        try:
            if self._session_id is not None:
                self._call("logout", {"session_id": self._session_id})
        except ApiConnectionError as exc:
            log.warning("ISPConfig logout failed: %s", exc)
        finally:
            client.close()
            self._client = None
            self._session_id = None
        log.info("ISPConfig Remote API disconnected")

    def list_dns_server_ids(self) -> list[str]:
        servers = self._data("server_get_all")
        if not isinstance(servers, list):
            raise ControlPlaneError("server_get_all did not return a list")
        server_ids: list[str] = []
        for item in servers:
            server = ServerPayload.model_validate(item)
            functions = parse_server_functions(
                self._data("server_get_functions", server_id=server.server_id)
            )
            if functions.is_dns_server:
                server_ids.append(server.server_id)
        log.debug("DNS servers: %s", ", ".join(server_ids) or "none")
        return server_ids

    def list_client_ids(self) -> list[str]:
        return parse_client_ids(self._data("client_get_all"))

    def list_zone_ids(self, *, client_id: str, server_id: str) -> list[str]:
        zones = self._data("dns_zone_get_by_user", client_id=client_id, server_id=server_id)
        return [zone.id for zone in parse_zone_summaries(zones)]

    def get_zone(self, zone_id: str) -> ZoneSnapshot:
        zone = parse_zone(self._data("dns_zone_get", primary_id=zone_id))
        return ZoneSnapshot(
            zone_id=zone.id,
            origin=zone.origin,
            dnssec_initialized=zone.is_signed,
            dnssec_info=zone.dnssec_info or "",
        )

    def _data(self, method: str, **params: object) -> object:
        if self._session_id is None:
            raise ApiConnectionError("ISPConfig session is not open", collaborator=COLLABORATOR)
        response = self._call(method, {"session_id": self._session_id, **params})
        if not response.success:
            log.error("ISPConfig API error on %s: %s", method, response.message)
            raise ControlPlaneError(f"ISPConfig {method} failed: {response.message}")
        return response.response

    def _call(self, method: str, params: Mapping[str, object]) -> RemoteResponse:
        client = self._client
        if client is None:
            raise ApiConnectionError("ISPConfig session is not open", collaborator=COLLABORATOR)
        url = httpx.URL(self._config.remote_uri).copy_with(query=method.encode())
        log.debug("ISPConfig call %s", method)
        try:
            response = client.post(url, json=dict(params))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise ApiConnectionError(
                f"ISPConfig request {method} failed: {exc}", collaborator=COLLABORATOR
            ) from exc
        except ValueError as exc:
            raise ApiConnectionError(
                f"ISPConfig answered {method} with invalid JSON", collaborator=COLLABORATOR
            ) from exc
        try:
            return RemoteResponse.model_validate(payload)
        except ValidationError as exc:
            raise ApiConnectionError(
                f"Unexpected ISPConfig response to {method}", collaborator=COLLABORATOR
            ) from exc
