from __future__ import annotations

import pytest

from dnssecsync.domain.errors import ApiConnectionError, RegistryNotVerifiedError
from dnssecsync.domain.reconciliation import (
    KeyOperationOutcome,
    OperationResult,
    ReconciliationContext,
    clean_corrupted_keys,
    clean_orphaned_keys,
    load_local_keys,
    prepare,
    publish_unpublished_keys,
)
from tests.helpers.dnssec import (
    OTHER_DIGEST,
    OTHER_PUBLIC_KEY,
    FakeRegistrar,
    make_local_key,
    make_remote_key,
)


def _context(registrar: FakeRegistrar, *origins: str) -> ReconciliationContext:
    context = ReconciliationContext(registrar=registrar)
    prepare(context, {origin: make_local_key(origin) for origin in origins})
    return context


def test_prepare_loads_both_sides_and_verifies() -> None:
    registrar = FakeRegistrar([make_remote_key(), make_remote_key(key_id="2", status="DELETED")])
    context = ReconciliationContext(registrar=registrar)

    loaded = prepare(context, {"example.com.": make_local_key()})

    assert (loaded.local, loaded.remote, loaded.discarded) == (1, 1, 1)
    assert context.registry.verified
    assert [zone.origin for zone in context.registry.live_zones()] == ["example.com."]


def test_actions_require_verified_registry() -> None:
    context = ReconciliationContext(registrar=FakeRegistrar())
    load_local_keys(context, {"example.com.": make_local_key()})

    with pytest.raises(RegistryNotVerifiedError):
        publish_unpublished_keys(context)


def test_publish_sends_one_request_per_unpublished_zone() -> None:
    registrar = FakeRegistrar([make_remote_key("example.net", key_id="5")])
    context = _context(registrar, "example.com.", "example.net.")

    outcomes = publish_unpublished_keys(context)

    assert [request.domain_name for request in registrar.added] == ["example.com"]
    assert registrar.added[0].dnskey == "example.com. IN DNSKEY 257 3 13 AAE="
    assert outcomes == [KeyOperationOutcome(subject="example.com.", result=OperationResult.OK)]


def test_publish_includes_zones_with_only_corrupted_keys() -> None:
    registrar = FakeRegistrar([make_remote_key(digest=OTHER_DIGEST)])
    context = _context(registrar, "example.com.")

    publish_unpublished_keys(context)

    assert [request.domain_name for request in registrar.added] == ["example.com"]


def test_failed_request_does_not_abort_batch() -> None:
    registrar = FakeRegistrar(failures={"example.com": 2302})
    context = _context(registrar, "example.com.", "example.net.")
    seen: list[KeyOperationOutcome] = []

    outcomes = publish_unpublished_keys(context, on_outcome=seen.append)

    assert [outcome.result for outcome in outcomes] == [OperationResult.ERROR, OperationResult.OK]
    assert outcomes[0].code == 2302
    assert outcomes[0].message == "Request for example.com rejected"
    assert seen == outcomes
    assert [request.domain_name for request in registrar.added] == ["example.net"]


def test_clean_corrupted_deletes_by_key_id() -> None:
    registrar = FakeRegistrar([make_remote_key(key_id="9", digest=OTHER_DIGEST)])
    context = _context(registrar, "example.com.")

    outcomes = clean_corrupted_keys(context)

    assert registrar.deleted == ["9"]
    assert outcomes[0].key_id == "9"
    assert outcomes[0].ok


def test_clean_orphaned_is_scoped_to_origin() -> None:
    registrar = FakeRegistrar(
        [
            make_remote_key(key_id="1", public_key=OTHER_PUBLIC_KEY, key_tag=1040),
            make_remote_key("other.com", key_id="2"),
        ]
    )
    context = _context(registrar, "example.com.")

    clean_orphaned_keys(context, "example.com")

    assert registrar.deleted == ["1"]


def test_clean_orphaned_leaves_live_and_corrupted_keys() -> None:
    registrar = FakeRegistrar(
        [
            make_remote_key(key_id="1"),
            make_remote_key(key_id="2", digest=OTHER_DIGEST),
            make_remote_key("other.com", key_id="3"),
        ]
    )
    context = _context(registrar, "example.com.")

    clean_orphaned_keys(context)

    assert registrar.deleted == ["3"]


def test_transport_failures_propagate() -> None:
    class BrokenRegistrar(FakeRegistrar):
        def delete_key(self, key_id: str) -> None:
            raise ApiConnectionError("connection reset", collaborator="INWX")

    registrar = BrokenRegistrar([make_remote_key("other.com", key_id="3")])
    context = _context(registrar, "example.com.")

    with pytest.raises(ApiConnectionError):
        clean_orphaned_keys(context)
