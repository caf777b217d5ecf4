"""Translate INWX key payloads into domain key records."""

from __future__ import annotations

from collections.abc import Mapping

from dnssecsync.domain.keys import RemoteKey

from .schema import KeyPayload

type KeyPayloadInput = KeyPayload | Mapping[str, object]


def _ensure_key_payload(payload: KeyPayloadInput) -> KeyPayload:
    if isinstance(payload, KeyPayload):
        return payload
    return KeyPayload.model_validate(payload)


def parse_remote_key(payload: KeyPayloadInput) -> RemoteKey:
    key = _ensure_key_payload(payload)
    return RemoteKey(
        key_id=key.id,
        owner_name=key.owner_name,
        flags=key.flag_id,
        algorithm=key.algorithm_id,
        public_key=key.public_key,
        key_tag=key.key_tag,
        digest_type=key.digest_type_id,
        digest=key.digest,
        status=key.status,
        domain_id=key.domain_id,
        created=key.created,
        active=key.active,
    )
