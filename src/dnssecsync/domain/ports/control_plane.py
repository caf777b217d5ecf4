"""Port for the DNS hosting control plane that signs zones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class ZoneSnapshot:
    """DNSSEC-relevant detail of one hosted zone."""

    zone_id: str
    origin: str
    dnssec_initialized: bool
    dnssec_info: str = ""


@runtime_checkable
class ControlPlane(Protocol):
    def list_dns_server_ids(self) -> Iterable[str]: ...

    def list_client_ids(self) -> Iterable[str]: ...

    def list_zone_ids(self, *, client_id: str, server_id: str) -> Iterable[str]: ...

    def get_zone(self, zone_id: str) -> ZoneSnapshot: ...


__all__ = ["ControlPlane", "ZoneSnapshot"]
