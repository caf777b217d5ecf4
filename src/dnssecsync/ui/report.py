"""Console rendering of registry state and operation outcomes.

Every function returns the lines to print; the CLI decides where they go.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from dnssecsync.domain.reconciliation import KeyOperationOutcome
    from dnssecsync.domain.registry import Zone, ZoneRegistry

LINE_WIDTH: Final[int] = 80
LIVE_LIFECYCLE_STATUS: Final[str] = "OK"
REPORT_ROW: Final[str] = "{:<8} {:<8} {:<8} {:<8} {:<2} {:<2} {}"

PUBLISH_TITLE: Final[str] = "PUBLISHING ALL UNPUBLISHED KEYS"
CLEAN_ORPHANED_TITLE: Final[str] = "REMOVING ALL ORPHANED KEYS"
CLEAN_CORRUPTED_TITLE: Final[str] = "REMOVING ALL ENTRIES WITH CORRUPTED KEY DATA"


def header(title: str) -> str:
    return f" {title} =====".rjust(LINE_WIDTH, "=")


def subheader(title: str) -> str:
    return f" {title} -----".rjust(LINE_WIDTH, "-")


def _mark(flag: bool) -> str:  # noqa: FBT001
    return "x" if flag else "-"


def _count(value: int) -> str:
    return str(value) if value else ""


def _first_live_status(zone: Zone) -> str:
    live = zone.live_keys()
    return live[0].lifecycle_status if live else ""


def summary_lines(registry: ZoneRegistry) -> list[str]:
    live_zones = registry.live_zones()
    working = [
        zone
        for zone in live_zones
        if any(key.lifecycle_status == LIVE_LIFECYCLE_STATUS for key in zone.live_keys())
    ]
    rows = [
        (len(live_zones), "Corresponding Keys in ISP and INWX"),
        (len(working), "Corresponding Keys live and working"),
        (len(registry.local_zones()), "signed zones in ISPConfig"),
        (len(registry.unpublished_zones()), "DNSSEC key from ISPConfig not published"),
        (len(registry.remote_zones()), "published zones in INWX"),
        (len(registry.corrupted_keys()), "Keys with corrupt data in INWX"),
        (len(registry.orphaned_keys()), "possible orphan keys in INWX"),
    ]
    return [header("DNSSEC ZONE SUMMARY"), *(f"{count:<8} {text}" for count, text in rows), ""]


def report_lines(registry: ZoneRegistry) -> list[str]:
    lines = [
        header("ZONE STATUS REPORT"),
        REPORT_ROW.format("Result", "ISP", "INWX", "Status", "Co", "Or", "Domain"),
    ]
    for zone in registry.zones():
        lines.append(
            REPORT_ROW.format(
                _mark(zone.status.is_ok),
                _mark(zone.status.known),
                _mark(zone.status.published),
                _first_live_status(zone),
                _count(len(zone.corrupted_keys())),
                _count(len(zone.orphaned_keys())),
                zone.origin,
            ).rstrip()
        )
    lines.append("")
    return lines


def zone_list_lines(registry: ZoneRegistry) -> list[str]:
    local_zones = registry.local_zones()
    remote_zones = registry.remote_zones()
    return [
        header("ZONE OVERVIEW"),
        subheader(f"{len(local_zones)} DNSSEC Zones exported from ISPConfig"),
        *(f"     - {zone.origin}" for zone in local_zones),
        subheader(f"{len(remote_zones)} DNSSEC Zones published to INWX"),
        *(f"     - {zone.origin}" for zone in remote_zones),
        "",
    ]


def keylist_lines(registry: ZoneRegistry, origin: str) -> list[str]:
    """Key detail listing of one zone.

    Raises ``UnknownZoneError`` when the registry never saw ``origin``.
    """

    zone = registry.zone(origin)
    lines = [header(f"{zone.origin} ZONE KEYS"), subheader("ISPConfig Key")]
    if zone.local_key is not None:
        lines.append(zone.local_key.canonical())
    else:
        lines.append(f"{'WARNING':<8} No DNSKey in ISPConfig")
    lines.append(subheader("INWX Keys"))
    if zone.published_keys:
        lines.extend(key.record.canonical() for key in zone.published_keys)
    else:
        lines.append(f"{'WARNING':<8} No DNSKey in INWX")
    return lines


def outcome_lines(outcome: KeyOperationOutcome) -> list[str]:
    lines = [f"{outcome.result.value:<8} {outcome.subject}"]
    if not outcome.ok:
        lines.append(f"{'':<8} [{outcome.code}] {outcome.message}")
    return lines
