"""Pydantic models describing the INWX Domrobot JSON-RPC payloads."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_CODE: Final[int] = 1000


def _to_str(value: object) -> object:
    if isinstance(value, int | float):
        return str(int(value))
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class InwxBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RpcResponse(InwxBaseModel):
    code: int
    msg: str = ""
    reason: str | None = None
    res_data: object = Field(default=None, alias="resData")

    @property
    def success(self) -> bool:
        return self.code == SUCCESS_CODE

    @property
    def message(self) -> str:
        return f"{self.msg} ({self.reason})" if self.reason else self.msg


class LoginData(InwxBaseModel):
    tfa: str = "0"

    _normalize_tfa = field_validator("tfa", mode="before")(_to_str)

    @property
    def requires_unlock(self) -> bool:
        return self.tfa not in {"", "0"}


class KeyPayload(InwxBaseModel):
    id: str
    owner_name: str = Field(alias="ownerName")
    domain_id: str | None = Field(default=None, alias="domainId")
    key_tag: int = Field(alias="keyTag")
    flag_id: int = Field(alias="flagId")
    algorithm_id: int = Field(alias="algorithmId")
    public_key: str = Field(alias="publicKey")
    digest_type_id: int = Field(alias="digestTypeId")
    digest: str
    created: str | None = None
    status: str
    active: bool | None = None

    _normalize_ids = field_validator("id", "domain_id", mode="before")(_to_str)
    _normalize_created = field_validator("created", mode="before")(_blank_to_none)


class ListKeysResponse(RpcResponse):
    res_data: list[KeyPayload] = Field(default_factory=list["KeyPayload"], alias="resData")

    @field_validator("res_data", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None or value == {} else value
