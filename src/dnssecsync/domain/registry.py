"""In-memory registry of zones and their local/published keys.

The registry lives for one invocation. It is filled by ``add_local``/``add_remote``
in any order, classified once by ``verify`` and then only read by the queries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import RegistryNotVerifiedError, UnknownZoneError
from .keys import normalize_origin
from .status import KNOWN, NOT_CHECKED, PUBLISHED, KeyStatus, match

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .keys import LocalKey, RemoteKey

log = getLogger(__name__)


@dataclass(slots=True)
class PublishedKey:
    """A registrar key together with its classification against the local key."""

    record: RemoteKey
    status: KeyStatus = PUBLISHED

    @property
    def key_id(self) -> str:
        return self.record.key_id

    @property
    def origin(self) -> str:
        return self.record.origin

    @property
    def lifecycle_status(self) -> str:
        return self.record.status

    def __str__(self) -> str:
        return self.record.origin


@dataclass(slots=True)
class Zone:
    origin: str
    local_key: LocalKey | None = None
    published_keys: list[PublishedKey] = field(default_factory=list["PublishedKey"])
    status: KeyStatus = NOT_CHECKED

    @property
    def has_local(self) -> bool:
        return self.local_key is not None

    @property
    def has_remote(self) -> bool:
        return bool(self.published_keys)

    def live_keys(self) -> list[PublishedKey]:
        """Every published key matching the local key in full (not only the first)."""

        return [key for key in self.published_keys if key.status.is_ok]

    def corrupted_keys(self) -> list[PublishedKey]:
        return [key for key in self.published_keys if key.status.is_corrupted]

    def orphaned_keys(self) -> list[PublishedKey]:
        return [key for key in self.published_keys if key.status.is_orphaned]

    def verify(self) -> KeyStatus:
        status = NOT_CHECKED
        if self.has_local:
            status |= KNOWN
        if self.has_remote:
            status |= PUBLISHED

        for key in self.published_keys:
            key.status = PUBLISHED

        if self.local_key is not None and self.has_remote:
            for key in self.published_keys:
                key.status = match(self.local_key, key.record)
                status |= key.status

        self.status = status
        return status


class ZoneRegistry:
    """Zones keyed by origin, in order of first sight."""

    def __init__(self) -> None:
        self._zones: dict[str, Zone] = {}
        self._verified = False

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones.values())

    def __contains__(self, origin: object) -> bool:
        return isinstance(origin, str) and _safe_origin(origin) in self._zones

    @property
    def verified(self) -> bool:
        return self._verified

    def _zone_for(self, origin: str) -> Zone:
        zone = self._zones.get(origin)
        if zone is None:
            zone = Zone(origin=origin)
            self._zones[origin] = zone
        return zone

    def add_local(self, origin: str, key: LocalKey) -> Zone:
        """Attach (or replace) the local key of ``origin``, creating the zone on first sight."""

        normalized = normalize_origin(origin)
        if key.origin != normalized:
            raise ValueError(f"Local key for {key.origin} cannot be filed under {normalized}")
        zone = self._zone_for(normalized)
        zone.local_key = key
        self._verified = False
        return zone

    def add_remote(self, key: RemoteKey) -> bool:
        """Append a registrar key to its zone; deleted lifecycle states are dropped.

        Returns ``True`` when the key was accepted.
        """

        if key.is_deleted:
            log.debug("Skipping %s key %s for %s", key.status, key.key_id, key.origin)
            return False
        zone = self._zone_for(key.origin)
        zone.published_keys.append(PublishedKey(record=key))
        self._verified = False
        return True

    def verify(self) -> None:
        """Classify every zone and every published key."""

        for zone in self._zones.values():
            status = zone.verify()
            log.debug("Verified %s: flags=%s", zone.origin, status.flags)
        self._verified = True

    def _require_verified(self) -> None:
        if not self._verified:
            raise RegistryNotVerifiedError("Zone registry must be verified before querying")

    def zone(self, origin: str) -> Zone:
        zone = self._zones.get(_safe_origin(origin))
        if zone is None:
            raise UnknownZoneError(origin)
        return zone

    def _scope(self, origin: str | None) -> Iterable[Zone]:
        if origin is None:
            return self._zones.values()
        return (self.zone(origin),)

    def zones(self) -> list[Zone]:
        return list(self._zones.values())

    def local_zones(self) -> list[Zone]:
        return [zone for zone in self._zones.values() if zone.has_local]

    def remote_zones(self) -> list[Zone]:
        return [zone for zone in self._zones.values() if zone.has_remote]

    def live_zones(self) -> list[Zone]:
        self._require_verified()
        return [zone for zone in self._zones.values() if zone.status.is_ok]

    def unpublished_zones(self) -> list[Zone]:
        """Zones known locally without a fully matching published key.

        Covers zones with no published key at all as well as zones whose published
        keys are all orphaned or corrupted; each of them needs a (re)publish.
        """

        self._require_verified()
        return [zone for zone in self._zones.values() if zone.status.is_unpublished]

    def corrupted_keys(self, origin: str | None = None) -> list[PublishedKey]:
        self._require_verified()
        return [key for zone in self._scope(origin) for key in zone.corrupted_keys()]

    def orphaned_keys(self, origin: str | None = None) -> list[PublishedKey]:
        self._require_verified()
        return [key for zone in self._scope(origin) for key in zone.orphaned_keys()]


def _safe_origin(origin: str) -> str:
    try:
        return normalize_origin(origin)
    except ValueError:
        return origin
