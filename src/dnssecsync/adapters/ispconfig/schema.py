"""Pydantic models describing ISPConfig JSON remoting payloads."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

SUCCESS_CODE: Final[str] = "ok"


def _to_str(value: object) -> object:
    if isinstance(value, int | float):
        return str(int(value))
    return value


def _unwrap_single(value: object) -> object:
    # Several calls wrap a single record in a one-element list.
    if isinstance(value, list) and len(value) == 1:
        return value[0]
    return value


class IspConfigBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RemoteResponse(IspConfigBaseModel):
    code: str
    message: str = ""
    response: object = None

    @property
    def success(self) -> bool:
        return self.code == SUCCESS_CODE


class ServerPayload(IspConfigBaseModel):
    server_id: str
    server_name: str = ""

    _normalize_id = field_validator("server_id", mode="before")(_to_str)


class ServerFunctions(IspConfigBaseModel):
    dns_server: str = "0"

    _normalize_flag = field_validator("dns_server", mode="before")(_to_str)

    @property
    def is_dns_server(self) -> bool:
        return self.dns_server == "1"


class ClientPayload(IspConfigBaseModel):
    client_id: str

    _normalize_id = field_validator("client_id", mode="before")(_to_str)


class ZoneSummary(IspConfigBaseModel):
    id: str
    origin: str = ""

    _normalize_id = field_validator("id", mode="before")(_to_str)


class ZonePayload(IspConfigBaseModel):
    id: str
    origin: str
    dnssec_initialized: str = "N"
    dnssec_info: str | None = None

    _normalize_id = field_validator("id", mode="before")(_to_str)

    @property
    def is_signed(self) -> bool:
        return self.dnssec_initialized.upper() == "Y"


def parse_server_functions(value: object) -> ServerFunctions:
    return ServerFunctions.model_validate(_unwrap_single(value) or {})


def parse_client_ids(value: object) -> list[str]:
    """Accept either bare ids or ``{"client_id": ...}`` records."""

    if not value:
        return []
    if not isinstance(value, list):
        raise TypeError(f"Expected a list of clients, got {type(value).__name__}")
    client_ids: list[str] = []
    for item in value:
        if isinstance(item, dict):
            client_ids.append(ClientPayload.model_validate(item).client_id)
        else:
            client_ids.append(str(item))
    return client_ids


def parse_zone_summaries(value: object) -> list[ZoneSummary]:
    if not value:
        return []
    if not isinstance(value, list):
        raise TypeError(f"Expected a list of zones, got {type(value).__name__}")
    return [ZoneSummary.model_validate(item) for item in value]


def parse_zone(value: object) -> ZonePayload:
    return ZonePayload.model_validate(_unwrap_single(value))
