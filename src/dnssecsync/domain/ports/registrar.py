"""Port for the registrar that publishes DNSSEC keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dnssecsync.domain.keys import LocalKey, RemoteKey


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Records submitted to the registrar for one zone."""

    domain_name: str
    dnskey: str
    ds: str

    @classmethod
    def for_key(cls, key: LocalKey) -> PublishRequest:
        return cls(domain_name=key.fqdn, dnskey=key.dnskey_record(), ds=key.ds_record())


@runtime_checkable
class KeyRegistrar(Protocol):
    """Registrar operations used by reconciliation.

    ``add_key``/``delete_key`` raise ``ProviderOperationError`` when the registrar
    rejects a single request and ``ApiConnectionError`` when the session fails.
    """

    def list_keys(self) -> Iterable[RemoteKey]: ...

    def add_key(self, request: PublishRequest) -> None: ...

    def delete_key(self, key_id: str) -> None: ...


__all__ = ["KeyRegistrar", "PublishRequest"]
