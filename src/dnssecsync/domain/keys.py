"""Key records known locally (control plane) and remotely (registrar)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

DNSKEY_PROTOCOL: Final[int] = 3
ZONE_SIGNING_KEY_FLAGS: Final[int] = 256
KEY_SIGNING_KEY_FLAGS: Final[int] = 257
DELETED_LIFECYCLE_STATES: Final[frozenset[str]] = frozenset({"DELETE", "DELETED"})

# Text every record renders for comparison and for detail printouts.
CANONICAL_FORMAT: Final[str] = (
    "ZONE   {origin}\n"
    "DNSKEY {flags} {protocol} {algorithm} {public_key}\n"
    "DS     {key_tag} {ds_algorithm} {digest_type} {digest}"
)


def normalize_origin(name: str) -> str:
    """Return ``name`` as a zone origin with exactly one trailing dot."""

    stripped = name.strip()
    if not stripped:
        raise ValueError("Zone origin must not be empty")
    return stripped.rstrip(".") + "."


def render_canonical(  # noqa: PLR0913
    *,
    origin: str,
    flags: int,
    protocol: int,
    algorithm: int,
    public_key: str,
    key_tag: int,
    ds_algorithm: int,
    digest_type: int,
    digest: str,
) -> str:
    return CANONICAL_FORMAT.format(
        origin=origin,
        flags=flags,
        protocol=protocol,
        algorithm=algorithm,
        public_key=public_key,
        key_tag=key_tag,
        ds_algorithm=ds_algorithm,
        digest_type=digest_type,
        digest=digest,
    )


@dataclass(frozen=True, slots=True)
class DnskeyRecord:
    origin: str
    flags: int
    protocol: int
    algorithm: int
    public_key: str

    @property
    def is_key_signing_key(self) -> bool:
        return self.flags == KEY_SIGNING_KEY_FLAGS

    def to_text(self) -> str:
        return (
            f"{self.origin} IN DNSKEY {self.flags} {self.protocol} "
            f"{self.algorithm} {self.public_key}"
        )


@dataclass(frozen=True, slots=True)
class DsRecord:
    origin: str
    key_tag: int
    algorithm: int
    digest_type: int
    digest: str

    def to_text(self) -> str:
        return (
            f"{self.origin} IN DS {self.key_tag} {self.algorithm} "
            f"{self.digest_type} {self.digest}"
        )


@dataclass(frozen=True, slots=True)
class LocalKey:
    """Key-signing key and DS record exported from the control plane for one zone."""

    dnskey: DnskeyRecord
    ds: DsRecord

    @property
    def origin(self) -> str:
        return self.dnskey.origin

    @property
    def fqdn(self) -> str:
        return self.origin.removesuffix(".")

    @property
    def public_key(self) -> str:
        return self.dnskey.public_key

    def dnskey_record(self) -> str:
        return self.dnskey.to_text()

    def ds_record(self) -> str:
        return self.ds.to_text()

    def canonical(self) -> str:
        return render_canonical(
            origin=self.dnskey.origin,
            flags=self.dnskey.flags,
            protocol=self.dnskey.protocol,
            algorithm=self.dnskey.algorithm,
            public_key=self.dnskey.public_key,
            key_tag=self.ds.key_tag,
            ds_algorithm=self.ds.algorithm,
            digest_type=self.ds.digest_type,
            digest=self.ds.digest,
        )

    def __str__(self) -> str:
        return self.origin


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteKey:
    """One key entry as listed by the registrar.

    The registrar keeps historical entries, so a zone can list several of these.
    """

    key_id: str
    owner_name: str
    flags: int
    algorithm: int
    public_key: str
    key_tag: int
    digest_type: int
    digest: str
    status: str
    domain_id: str | None = None
    created: str | None = None
    active: bool | None = None

    @property
    def origin(self) -> str:
        return normalize_origin(self.owner_name)

    @property
    def is_deleted(self) -> bool:
        return self.status.upper() in DELETED_LIFECYCLE_STATES

    def canonical(self) -> str:
        return render_canonical(
            origin=self.origin,
            flags=self.flags,
            protocol=DNSKEY_PROTOCOL,
            algorithm=self.algorithm,
            public_key=self.public_key,
            key_tag=self.key_tag,
            ds_algorithm=self.algorithm,
            digest_type=self.digest_type,
            digest=self.digest,
        )

    def __str__(self) -> str:
        return self.origin
