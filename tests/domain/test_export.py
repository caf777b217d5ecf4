from __future__ import annotations

import pytest

from dnssecsync.domain.errors import DnssecInfoParseError
from dnssecsync.domain.export import collect_local_keys
from dnssecsync.domain.ports.control_plane import ZoneSnapshot
from tests.helpers.dnssec import FakeControlPlane, dnssec_info_block


def _signed(zone_id: str, origin: str) -> ZoneSnapshot:
    return ZoneSnapshot(
        zone_id=zone_id,
        origin=origin,
        dnssec_initialized=True,
        dnssec_info=dnssec_info_block(origin),
    )


def test_collects_signed_zones_and_reports_unsigned() -> None:
    control_plane = FakeControlPlane(
        {
            "10": {"1": [_signed("1", "example.com."), ZoneSnapshot("2", "plain.org.", False)]},
            "11": {"1": [_signed("3", "example.net")]},
        }
    )

    result = collect_local_keys(control_plane)

    assert sorted(result.keys) == ["example.com.", "example.net."]
    assert result.unsigned == ["plain.org."]
    assert result.zone_count == 3
    assert result.keys["example.net."].origin == "example.net."


def test_walks_every_dns_server() -> None:
    control_plane = FakeControlPlane(
        {"10": {"1": [_signed("1", "example.com.")], "2": [_signed("2", "example.org.")]}},
        server_ids=("1", "2"),
    )

    result = collect_local_keys(control_plane)

    assert sorted(result.keys) == ["example.com.", "example.org."]
    assert control_plane.fetched == ["1", "2"]


def test_unparseable_signed_zone_aborts() -> None:
    broken = ZoneSnapshot("1", "broken.example.", True, "DS-Records:\n")
    control_plane = FakeControlPlane({"10": {"1": [broken]}})

    with pytest.raises(DnssecInfoParseError, match="broken.example."):
        collect_local_keys(control_plane)
