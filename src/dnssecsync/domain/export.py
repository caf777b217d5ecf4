"""Collect the locally managed DNSSEC keys from the control plane."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .dnssec_info import local_key_from_info
from .keys import normalize_origin

if TYPE_CHECKING:
    from .keys import LocalKey
    from .ports.control_plane import ControlPlane

log = getLogger(__name__)


@dataclass(slots=True)
class ExportResult:
    """Outcome of one control-plane scan."""

    keys: dict[str, LocalKey] = field(default_factory=dict["str", "LocalKey"])
    unsigned: list[str] = field(default_factory=list["str"])

    @property
    def zone_count(self) -> int:
        return len(self.keys) + len(self.unsigned)


def collect_local_keys(control_plane: ControlPlane) -> ExportResult:
    """Walk every client zone on every DNS server and extract its signing key.

    Zones without initialised DNSSEC are reported as unsigned. A signed zone whose
    DNSSEC info lacks a usable KSK/DS pair aborts the scan with
    ``DnssecInfoParseError``.
    """

    server_ids = list(control_plane.list_dns_server_ids())
    log.info("Loading DNS zones of all clients from %s DNS server(s)", len(server_ids))

    result = ExportResult()
    for client_id in control_plane.list_client_ids():
        for server_id in server_ids:
            for zone_id in control_plane.list_zone_ids(client_id=client_id, server_id=server_id):
                zone = control_plane.get_zone(zone_id)
                origin = normalize_origin(zone.origin)
                if not zone.dnssec_initialized:
                    if origin not in result.unsigned:
                        result.unsigned.append(origin)
                    continue
                result.keys[origin] = local_key_from_info(origin, zone.dnssec_info)

    log.info(
        "%s zones loaded: %s signed, %s unsigned",
        result.zone_count,
        len(result.keys),
        len(result.unsigned),
    )
    return result
