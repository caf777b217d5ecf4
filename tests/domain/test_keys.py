from __future__ import annotations

import pytest

from dnssecsync.domain.keys import normalize_origin
from dnssecsync.domain.ports.registrar import PublishRequest
from tests.helpers.dnssec import DIGEST, make_local_key, make_remote_key


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("example.com", "example.com."),
        ("example.com.", "example.com."),
        ("  example.com..  ", "example.com."),
    ],
)
def test_normalize_origin(raw: str, expected: str) -> None:
    assert normalize_origin(raw) == expected


def test_normalize_origin_rejects_blank() -> None:
    with pytest.raises(ValueError, match="empty"):
        normalize_origin("   ")


def test_local_key_records() -> None:
    key = make_local_key()

    assert key.origin == "example.com."
    assert key.fqdn == "example.com"
    assert key.dnskey_record() == "example.com. IN DNSKEY 257 3 13 AAE="
    assert key.ds_record() == f"example.com. IN DS 1039 13 2 {DIGEST}"
    assert str(key) == "example.com."


def test_local_key_canonical_layout() -> None:
    assert make_local_key().canonical() == (
        "ZONE   example.com.\n"
        "DNSKEY 257 3 13 AAE=\n"
        f"DS     1039 13 2 {DIGEST}"
    )


def test_remote_key_canonical_matches_local_layout() -> None:
    remote = make_remote_key()

    assert remote.origin == "example.com."
    assert remote.canonical() == make_local_key().canonical()


@pytest.mark.parametrize("status", ["DELETE", "DELETED", "deleted"])
def test_remote_key_deleted_states(status: str) -> None:
    assert make_remote_key(status=status).is_deleted


@pytest.mark.parametrize("status", ["OK", "CREATE", "DELAYED"])
def test_remote_key_live_states(status: str) -> None:
    assert not make_remote_key(status=status).is_deleted


def test_publish_request_for_key() -> None:
    request = PublishRequest.for_key(make_local_key())

    assert request.domain_name == "example.com"
    assert request.dnskey == "example.com. IN DNSKEY 257 3 13 AAE="
    assert request.ds == f"example.com. IN DS 1039 13 2 {DIGEST}"
