"""Parse the free-text DNSSEC info block the control plane stores per zone.

The block is zone-file text, typically::

    DS-Records:
    example.com. IN DS 2371 13 2 1F987CC6583E9 2DF0890718C42 ...
    ------------------------------------------------------------
    DNSKEY-Records:
    example.com. IN DNSKEY 256 3 13 oJMRESz5E4gYzS/q6XDrvU1qMPYIjCWz ...
    example.com. IN DNSKEY 257 3 13 mdsswUyr3DPW132mOi8V9xESWE8jTo0d ...

Keys and digests may be split by whitespace; rdata parsing joins them. Only DS
records with a digest type of 2 (SHA-256) or above are kept.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from logging import getLogger
from typing import Final

import dns.dnssec
import dns.exception
import dns.rdata
import dns.rdataclass
import dns.rdatatype

from .errors import DnssecInfoParseError
from .keys import (
    KEY_SIGNING_KEY_FLAGS,
    ZONE_SIGNING_KEY_FLAGS,
    DnskeyRecord,
    DsRecord,
    LocalKey,
    normalize_origin,
)

log = getLogger(__name__)

MIN_DIGEST_TYPE: Final[int] = 2

_RECORD_LINE = re.compile(
    r"^(?P<owner>\S+)\s+(?:\d+\s+)?(?:IN\s+)?(?P<rtype>DS|DNSKEY)\s+(?P<rdata>.+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class DnssecInfo:
    origin: str
    ds_records: tuple[DsRecord, ...] = ()
    zone_signing_keys: tuple[DnskeyRecord, ...] = ()
    key_signing_keys: tuple[DnskeyRecord, ...] = ()

    def local_key(self) -> LocalKey:
        """Pair one key-signing key with one DS record for registrar submission.

        The first KSK whose key tag and algorithm match a DS record wins; without
        any such pair the first KSK is paired by algorithm alone. Among candidate
        DS records the lowest digest type wins.
        """

        if not self.key_signing_keys:
            raise DnssecInfoParseError("no key-signing DNSKEY (257) record", origin=self.origin)
        if not self.ds_records:
            raise DnssecInfoParseError(
                f"no DS record with digest type {MIN_DIGEST_TYPE} or higher",
                origin=self.origin,
            )

        for ksk in self.key_signing_keys:
            tag = key_tag(ksk)
            candidates = [
                ds
                for ds in self.ds_records
                if ds.key_tag == tag and ds.algorithm == ksk.algorithm
            ]
            if candidates:
                return LocalKey(dnskey=ksk, ds=_preferred_digest(candidates))

        ksk = self.key_signing_keys[0]
        candidates = [ds for ds in self.ds_records if ds.algorithm == ksk.algorithm]
        if not candidates:
            raise DnssecInfoParseError(
                f"no DS record for key-signing key algorithm {ksk.algorithm}",
                origin=self.origin,
            )
        log.warning(
            "%s: no DS key tag matches a key-signing key; pairing by algorithm %s",
            self.origin,
            ksk.algorithm,
        )
        return LocalKey(dnskey=ksk, ds=_preferred_digest(candidates))


def _preferred_digest(candidates: list[DsRecord]) -> DsRecord:
    return min(candidates, key=lambda ds: ds.digest_type)


def key_tag(record: DnskeyRecord) -> int:
    """Compute the RFC 4034 key tag of ``record``."""

    rdata = dns.rdata.from_text(
        dns.rdataclass.IN,
        dns.rdatatype.DNSKEY,
        f"{record.flags} {record.protocol} {record.algorithm} {record.public_key}",
    )
    return dns.dnssec.key_id(rdata)  # pyright: ignore[reportArgumentType]


def parse_dnssec_info(origin: str, text: str) -> DnssecInfo:
    """Split a DNSSEC info block into DS, zone-signing and key-signing records.

    Lines that are not DS/DNSKEY records (headers, separators, records of other
    owners) are ignored; a DS/DNSKEY line whose rdata cannot be parsed raises
    ``DnssecInfoParseError``.
    """

    zone_origin = normalize_origin(origin)
    ds_records: list[DsRecord] = []
    zsks: list[DnskeyRecord] = []
    ksks: list[DnskeyRecord] = []

    for raw_line in text.splitlines():
        line = raw_line.split(";", 1)[0].strip()
        matched = _RECORD_LINE.match(line)
        if matched is None:
            continue
        owner = normalize_origin(matched["owner"])
        if owner != zone_origin:
            log.debug("%s: ignoring record owned by %s", zone_origin, owner)
            continue
        rtype = matched["rtype"].upper()
        rdata_text = matched["rdata"].replace("(", " ").replace(")", " ")

        if rtype == "DS":
            ds = _parse_ds(zone_origin, rdata_text)
            if ds.digest_type < MIN_DIGEST_TYPE:
                log.debug(
                    "%s: skipping DS %s with digest type %s",
                    zone_origin,
                    ds.key_tag,
                    ds.digest_type,
                )
                continue
            ds_records.append(ds)
            continue

        dnskey = _parse_dnskey(zone_origin, rdata_text)
        if dnskey.flags == KEY_SIGNING_KEY_FLAGS:
            ksks.append(dnskey)
        elif dnskey.flags == ZONE_SIGNING_KEY_FLAGS:
            zsks.append(dnskey)
        else:
            log.debug("%s: ignoring DNSKEY with flags %s", zone_origin, dnskey.flags)

    return DnssecInfo(
        origin=zone_origin,
        ds_records=tuple(ds_records),
        zone_signing_keys=tuple(zsks),
        key_signing_keys=tuple(ksks),
    )


def _parse_ds(origin: str, text: str) -> DsRecord:
    try:
        rdata = dns.rdata.from_text(dns.rdataclass.IN, dns.rdatatype.DS, text)
    except (dns.exception.DNSException, ValueError) as exc:
        raise DnssecInfoParseError(f"invalid DS record: {exc}", origin=origin) from exc
    return DsRecord(
        origin=origin,
        key_tag=int(rdata.key_tag),  # pyright: ignore[reportAttributeAccessIssue]
        algorithm=int(rdata.algorithm),  # pyright: ignore[reportAttributeAccessIssue]
        digest_type=int(rdata.digest_type),  # pyright: ignore[reportAttributeAccessIssue]
        digest=rdata.digest.hex().upper(),  # pyright: ignore[reportAttributeAccessIssue]
    )


def _parse_dnskey(origin: str, text: str) -> DnskeyRecord:
    try:
        rdata = dns.rdata.from_text(dns.rdataclass.IN, dns.rdatatype.DNSKEY, text)
    except (dns.exception.DNSException, ValueError) as exc:
        raise DnssecInfoParseError(f"invalid DNSKEY record: {exc}", origin=origin) from exc
    return DnskeyRecord(
        origin=origin,
        flags=int(rdata.flags),  # pyright: ignore[reportAttributeAccessIssue]
        protocol=int(rdata.protocol),  # pyright: ignore[reportAttributeAccessIssue]
        algorithm=int(rdata.algorithm),  # pyright: ignore[reportAttributeAccessIssue]
        public_key=base64.b64encode(rdata.key).decode("ascii"),  # pyright: ignore[reportAttributeAccessIssue]
    )


def local_key_from_info(origin: str, text: str) -> LocalKey:
    return parse_dnssec_info(origin, text).local_key()
