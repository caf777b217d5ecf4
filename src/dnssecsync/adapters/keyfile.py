"""Read and write the JSON artifact holding the exported local keys."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from dnssecsync.domain.errors import MalformedExportError
from dnssecsync.domain.keys import DnskeyRecord, DsRecord, LocalKey, normalize_origin

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = getLogger(__name__)


class KeyfileBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DnskeyEntry(KeyfileBaseModel):
    type: int
    protocol: int
    cipher: int
    key: str
    origin: str | None = None
    record: str | None = None

    def to_record(self, origin: str) -> DnskeyRecord:
        return DnskeyRecord(
            origin=origin,
            flags=self.type,
            protocol=self.protocol,
            algorithm=self.cipher,
            public_key=self.key,
        )

    @classmethod
    def from_record(cls, record: DnskeyRecord) -> DnskeyEntry:
        return cls(
            type=record.flags,
            protocol=record.protocol,
            cipher=record.algorithm,
            key=record.public_key,
            origin=record.origin,
            record=record.to_text(),
        )


class DsEntry(KeyfileBaseModel):
    id: int
    cipher: int
    hashtype: int
    hash: str
    origin: str | None = None
    record: str | None = None

    def to_record(self, origin: str) -> DsRecord:
        return DsRecord(
            origin=origin,
            key_tag=self.id,
            algorithm=self.cipher,
            digest_type=self.hashtype,
            digest=self.hash,
        )

    @classmethod
    def from_record(cls, record: DsRecord) -> DsEntry:
        return cls(
            id=record.key_tag,
            cipher=record.algorithm,
            hashtype=record.digest_type,
            hash=record.digest,
            origin=record.origin,
            record=record.to_text(),
        )


class KeyEntry(KeyfileBaseModel):
    dnskey: DnskeyEntry = Field(alias="DNSKEY")
    ds: DsEntry = Field(alias="DS")

    def to_local_key(self, origin: str) -> LocalKey:
        """Build the key filed under ``origin``; entries without their own origin inherit it."""

        for declared in (self.dnskey.origin, self.ds.origin):
            if declared is not None and normalize_origin(declared) != origin:
                raise ValueError(f"entry declares origin {declared!r}")
        return LocalKey(dnskey=self.dnskey.to_record(origin), ds=self.ds.to_record(origin))

    @classmethod
    def from_local_key(cls, key: LocalKey) -> KeyEntry:
        return cls(dnskey=DnskeyEntry.from_record(key.dnskey), ds=DsEntry.from_record(key.ds))


class Keyfile(RootModel[dict[str, KeyEntry]]):
    pass


def read_local_keys(path: Path) -> dict[str, LocalKey]:
    """Load the exported keys, keyed by normalised origin."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise MalformedExportError(f"Export file not found: {path}") from exc
    except OSError as exc:
        raise MalformedExportError(f"Export file not readable: {path}: {exc}") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedExportError(f"Export file is not valid JSON: {path}: {exc}") from exc
    if not payload:
        raise MalformedExportError(f"Export file contains no keys: {path}")

    try:
        keyfile = Keyfile.model_validate(payload)
    except ValidationError as exc:
        raise MalformedExportError(f"Export file has an unexpected shape: {path}: {exc}") from exc

    keys: dict[str, LocalKey] = {}
    for origin, entry in keyfile.root.items():
        try:
            normalized = normalize_origin(origin)
            keys[normalized] = entry.to_local_key(normalized)
        except ValueError as exc:
            raise MalformedExportError(
                f"Export file has an invalid origin {origin!r}: {exc}"
            ) from exc
    log.info("%s local keys read from %s", len(keys), path)
    return keys


def write_local_keys(path: Path, keys: Mapping[str, LocalKey]) -> Path:
    keyfile = Keyfile({origin: KeyEntry.from_local_key(key) for origin, key in keys.items()})
    payload = keyfile.model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    log.info("%s local keys written to %s", len(keys), path)
    return path
